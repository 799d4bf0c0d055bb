from dataclasses import dataclass

from src.farmconnect.core.services import (
    ChatService,
    DbSessionService,
    FileStorageService,
    JwtGeneratorService,
    JwtVerificationService,
    MarketPriceService,
    SessionStorage,
    UserSessionService,
)


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    session_storage: SessionStorage
    user_session_service: UserSessionService
    jwt_generation_service: JwtGeneratorService
    jwt_verify_service: JwtVerificationService
    file_storage: FileStorageService
    chat_service: ChatService
    market_price_service: MarketPriceService
