"""
KrishiSetu - Farmer & buyer portal.
FastAPI backend: auth, accounts/roles, crop prediction, cost & profit calculators, marketplace.
"""
from typing import Optional, List, Literal

from fastapi import FastAPI, Depends, HTTPException, Header, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from accounts import AccountStore, AccountError
from auth import create_access_token, verify_token
from config import ADMIN_EMAIL, ADMIN_PASSWORD, CORS_ORIGINS
from cost_calculator import calculate_cost
from crop_prediction import predict_crop
from logger import get_logger
from marketplace import Marketplace, ListingError
from profit_calculator import calculate_profit

logger = get_logger(__name__)

app = FastAPI(title="KrishiSetu API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Process-local stores; reset on restart
accounts = AccountStore()
accounts.ensure_admin(ADMIN_EMAIL, ADMIN_PASSWORD)
marketplace = Marketplace()

UserType = Literal["admin", "farmer", "buyer"]
UserRole = Literal["admin", "user", "guest"]


# --- Request/Response models ---
class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str
    user_type: UserType = "farmer"


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_type: UserType


class ProfileResponse(BaseModel):
    email: str
    name: Optional[str] = None
    user_type: UserType
    role: UserRole


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    password: Optional[str] = None


class RoleResponse(BaseModel):
    role: UserRole
    is_admin: bool
    is_farmer: bool
    is_buyer: bool


class CropPredictionRequest(BaseModel):
    temperature: float = Field(..., ge=-10, le=60, description="Temperature in Celsius")
    humidity: float = Field(..., ge=0, le=100, description="Humidity percentage")
    rainfall: float = Field(..., ge=0, le=5000, description="Rainfall in mm")
    ph: float = Field(..., ge=0, le=14, description="Soil pH")
    nitrogen: float = Field(..., ge=0, le=200)
    phosphorus: float = Field(..., ge=0, le=200)
    potassium: float = Field(..., ge=0, le=200)


class CropPredictionResult(BaseModel):
    crop: str
    confidence: int
    reason: str
    icon: str


class CostRequest(BaseModel):
    crop_type: str = "rice"
    land_area: float = Field(1, ge=0, description="Land area in acres")
    seeds: float = Field(0, ge=0)
    fertilizers: float = Field(0, ge=0)
    labor: float = Field(0, ge=0)
    irrigation: float = Field(0, ge=0)
    equipment: float = Field(0, ge=0)


class CostBreakdownItem(BaseModel):
    category: str
    amount: float
    percentage: float


class CostBreakdownResponse(BaseModel):
    crop_type: str
    land_area: float
    items: List[CostBreakdownItem]
    total: float
    cost_per_acre: float


class ProfitRequest(BaseModel):
    cultivation_cost: float = Field(..., ge=0)
    yield_quantity: float = Field(..., ge=0, description="Expected yield in quintals")
    market_price: float = Field(..., ge=0, description="Price per quintal")


class ProfitResponse(BaseModel):
    revenue: float
    profit: float
    profit_margin: float
    status: Literal["profit", "loss"]
    message: str


class ListingRequest(BaseModel):
    crop_name: str
    quantity: float = Field(..., gt=0, description="Quantity in quintals")
    price: float = Field(..., gt=0, description="Price per quintal")
    location: str
    farmer_name: str
    contact: str


class Listing(ListingRequest):
    id: str
    image: str


class AdminUserEntry(BaseModel):
    principal: str
    profile: ProfileResponse


class AdminUsersResponse(BaseModel):
    users: List[AdminUserEntry]
    stats: dict


class RoleUpdate(BaseModel):
    role: UserRole


class UserTypeUpdate(BaseModel):
    user_type: UserType


# --- Auth dependencies ---
def get_token(authorization: Optional[str] = Header(None)) -> dict:
    """Extract and validate Bearer token from Authorization header; returns its payload."""
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing token")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    payload = verify_token(parts[1])
    if payload is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return payload


def get_current_user(payload: dict = Depends(get_token)) -> str:
    """Principal of the caller; the account must still exist."""
    principal = payload.get("sub")
    if not principal or accounts.get_profile(principal) is None:
        raise HTTPException(status_code=401, detail="Account no longer exists")
    return principal


def require_farmer(principal: str = Depends(get_current_user)) -> str:
    """Calculators and listing creation are for farmers (admins may use them too)."""
    if not (accounts.is_farmer(principal) or accounts.is_admin(principal)):
        raise HTTPException(status_code=403, detail="Farmer account required")
    return principal


def require_admin(principal: str = Depends(get_current_user)) -> str:
    if not accounts.is_admin(principal):
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return principal


def _account_http_error(e: AccountError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


def _profile_response(profile: dict) -> ProfileResponse:
    return ProfileResponse(
        email=profile["email"],
        name=profile["name"],
        user_type=profile["user_type"],
        role=profile["role"],
    )


def _issue_token(profile: dict) -> LoginResponse:
    token = create_access_token(data={"sub": profile["email"].lower(), "type": profile["user_type"]})
    return LoginResponse(access_token=token, user_type=profile["user_type"])


# --- Accounts ---
@app.post("/register/farmer", response_model=LoginResponse, status_code=201)
def register_farmer(req: RegisterRequest):
    """Create a farmer account and log it in."""
    try:
        profile = accounts.register_farmer(req.email, req.password, req.name)
    except AccountError as e:
        raise _account_http_error(e)
    return _issue_token(profile)


@app.post("/register/buyer", response_model=LoginResponse, status_code=201)
def register_buyer(req: RegisterRequest):
    """Create a buyer account and log it in."""
    try:
        profile = accounts.register_buyer(req.email, req.password, req.name)
    except AccountError as e:
        raise _account_http_error(e)
    return _issue_token(profile)


@app.post("/login", response_model=LoginResponse)
def login(req: LoginRequest):
    """Login with email/password as the given user type; returns JWT."""
    try:
        profile = accounts.login(req.email, req.password, req.user_type)
    except AccountError as e:
        raise _account_http_error(e)
    return _issue_token(profile)


@app.get("/profile", response_model=ProfileResponse)
def get_profile(principal: str = Depends(get_current_user)):
    return _profile_response(accounts.get_profile(principal))


@app.put("/profile", response_model=ProfileResponse)
def save_profile(req: ProfileUpdate, principal: str = Depends(get_current_user)):
    profile = accounts.save_profile(principal, name=req.name, password=req.password)
    return _profile_response(profile)


@app.get("/role", response_model=RoleResponse)
def get_role(principal: str = Depends(get_current_user)):
    return RoleResponse(
        role=accounts.get_role(principal),
        is_admin=accounts.is_admin(principal),
        is_farmer=accounts.is_farmer(principal),
        is_buyer=accounts.is_buyer(principal),
    )


# --- Farmer tools ---
@app.post("/predict-crop", response_model=List[CropPredictionResult])
def crop_prediction(req: CropPredictionRequest, principal: str = Depends(require_farmer)):
    """Top 3 crops for the given weather and soil readings."""
    results = predict_crop(**req.model_dump())
    logger.info("Crop prediction for %s: %s", principal,
                ", ".join(f"{r['crop']} {r['confidence']}%" for r in results))
    return results


@app.post("/calculate-cost", response_model=CostBreakdownResponse)
def cost_breakdown(req: CostRequest, principal: str = Depends(require_farmer)):
    """Itemized cultivation cost with each category's share of the total."""
    return calculate_cost(**req.model_dump())


@app.post("/calculate-profit", response_model=ProfitResponse)
def profit_forecast(req: ProfitRequest, principal: str = Depends(require_farmer)):
    """Revenue, profit/loss and margin for an expected harvest."""
    result = calculate_profit(**req.model_dump())
    if result["profit"] >= 0:
        status, message = "profit", "Profitable!"
    else:
        status, message = "loss", "Loss detected"
    return ProfitResponse(**result, status=status, message=message)


# --- Marketplace ---
@app.get("/marketplace/listings", response_model=List[Listing])
def list_listings(
    search: Optional[str] = Query(None, description="Matches crop name or location"),
    crop: str = Query("all", description="Crop name or 'all'"),
    location: str = Query("all", description="Location substring or 'all'"),
    principal: str = Depends(get_current_user),
):
    return marketplace.filter_listings(search=search, crop=crop, location=location)


@app.post("/marketplace/listings", response_model=Listing, status_code=201)
def add_listing(req: ListingRequest, principal: str = Depends(require_farmer)):
    try:
        return marketplace.add_listing(**req.model_dump())
    except ListingError as e:
        raise HTTPException(status_code=400, detail=str(e))


# --- Admin ---
@app.get("/admin/users", response_model=AdminUsersResponse)
def list_users(principal: str = Depends(require_admin)):
    users = [
        AdminUserEntry(principal=p, profile=_profile_response(profile))
        for p, profile in accounts.list_users()
    ]
    return AdminUsersResponse(users=users, stats=accounts.user_stats())


@app.post("/admin/users", response_model=ProfileResponse, status_code=201)
def create_admin(req: RegisterRequest, principal: str = Depends(require_admin)):
    try:
        profile = accounts.create_admin_account(req.email, req.password, req.name)
    except AccountError as e:
        raise _account_http_error(e)
    logger.info("Admin %s created admin account %s", principal, req.email)
    return _profile_response(profile)


@app.put("/admin/users/{email}/role", response_model=ProfileResponse)
def assign_role(email: str, req: RoleUpdate, principal: str = Depends(require_admin)):
    try:
        profile = accounts.assign_role(email.lower(), req.role)
    except AccountError as e:
        raise _account_http_error(e)
    return _profile_response(profile)


@app.put("/admin/users/{email}/type", response_model=ProfileResponse)
def change_user_type(email: str, req: UserTypeUpdate, principal: str = Depends(require_admin)):
    try:
        profile = accounts.change_user_type(email.lower(), req.user_type)
    except AccountError as e:
        raise _account_http_error(e)
    return _profile_response(profile)


@app.delete("/admin/users/{email}", status_code=204)
def delete_account(email: str, principal: str = Depends(require_admin)):
    try:
        accounts.delete_account(email.lower())
    except AccountError as e:
        raise _account_http_error(e)


@app.get("/health")
def health():
    return {
        "status": "active",
        "version": "1.0.0",
        "security_layer": "JWT enabled",
        "features": [
            "accounts",
            "crop_prediction",
            "cost_calculator",
            "profit_calculator",
            "marketplace",
            "admin",
        ],
    }
