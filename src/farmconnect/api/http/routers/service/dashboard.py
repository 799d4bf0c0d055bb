"""Role dashboards."""

from fastapi import APIRouter, Depends

from src.farmconnect.api.http.deps import (
    get_cart_service,
    get_current_profile,
    get_dashboard_service,
    require_user_type,
)
from src.farmconnect.core.services import CartService, DashboardService
from src.farmconnect.core.services.marketplace import FarmerDashboard, UserDashboard
from src.farmconnect.entities.core.profile import Profile

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/user", response_model=UserDashboard)
async def user_dashboard(
    profile: Profile = Depends(get_current_profile),
    cart: CartService = Depends(get_cart_service),
    dashboards: DashboardService = Depends(get_dashboard_service),
) -> UserDashboard:
    return dashboards.user_dashboard(profile, await cart.get())


@router.get("/farmer", response_model=FarmerDashboard)
def farmer_dashboard(
    farmer: Profile = Depends(require_user_type("farmer")),
    dashboards: DashboardService = Depends(get_dashboard_service),
) -> FarmerDashboard:
    return dashboards.farmer_dashboard(farmer)
