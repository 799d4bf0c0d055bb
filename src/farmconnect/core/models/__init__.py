"""Shared request, response and session models."""

from .auth import (
    ChangePasswordRequest,
    CurrentUser,
    SignInRequest,
    SignInResult,
    SignUpRequest,
)
from .cart import Cart, CartFarmer, CartItem, CartUpdate
from .catalog import Coordinates, FarmerCard, ProductListing
from .session import TokenClaims, UserSession

__all__ = [
    "Cart",
    "CartFarmer",
    "CartItem",
    "CartUpdate",
    "ChangePasswordRequest",
    "Coordinates",
    "CurrentUser",
    "FarmerCard",
    "ProductListing",
    "SignInRequest",
    "SignInResult",
    "SignUpRequest",
    "TokenClaims",
    "UserSession",
]
