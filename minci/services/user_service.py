"""User service for runner identities"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from minci.models.user import User
from minci.services import store


class UserService:
    """Service for user-related operations"""

    @staticmethod
    async def create_user(
        session: AsyncSession, apikey: int, apisecret: str, email: str
    ) -> User:
        """
        Create a new runner identity.

        Args:
            session: Database session
            apikey: Public key the runner will send
            apisecret: Shared signing secret, stored as given
            email: Contact address for the audit log

        Returns:
            User: Created user
        """
        return await store.insert(session, User(apikey=apikey, apisecret=apisecret, email=email))

    @staticmethod
    async def get_user_by_api_key(session: AsyncSession, apikey: int) -> User | None:
        """
        Get user by API key.

        Args:
            session: Database session
            apikey: API key sent with the report

        Returns:
            User: User object if found, None otherwise
        """
        stmt = select(User).where(User.apikey == apikey)
        return await store.fetch_one(session, stmt)
