import logging
import re

from sqlalchemy import BigInteger, cast, func
from sqlalchemy.orm import Session

from inventory.config import get_settings
from inventory.exceptions import ConflictError
from inventory.models.product import Product

logger = logging.getLogger(__name__)

settings = get_settings()


def format_product_id(number: int, prefix: str = None, width: int = None) -> str:
    """
    Render a sequence number as a product identifier.

    Numbers are zero-padded to ``width`` digits; wider numbers keep all of
    their digits, so 7 becomes ``P007`` and 1000 becomes ``P1000``.
    """
    prefix = settings.PRODUCT_ID_PREFIX if prefix is None else prefix
    width = settings.PRODUCT_ID_WIDTH if width is None else width
    return f"{prefix}{number:0{width}d}"


class IdentifierAllocator:
    """
    Allocates sequential, human-readable product identifiers.

    ALLOCATION STRATEGY:
    ====================
    1. Read the highest numeric suffix among identifiers shaped like
       ``P<digits>`` (no rows counts as 0)
    2. Propose ``max + 1``
    3. Re-check the proposal directly, since another request may have
       inserted it in between
    4. While the proposal is taken, move to the next number and re-check,
       giving up with ConflictError after ``max_attempts`` proposals

    Allocation is not transactional. Two requests can still pick the same
    free identifier; the loser sees a duplicate-key rejection on insert and
    ProductService retries the allocation from step 1.
    """

    def __init__(self, db: Session, prefix: str = None, width: int = None, max_attempts: int = None):
        self.db = db
        self.prefix = settings.PRODUCT_ID_PREFIX if prefix is None else prefix
        self.width = settings.PRODUCT_ID_WIDTH if width is None else width
        self.max_attempts = max_attempts or settings.PRODUCT_ID_MAX_ATTEMPTS

    def allocate(self) -> str:
        """
        Compute the next unused product identifier.

        Returns:
            Identifier such as ``P001``

        Raises:
            ConflictError: If every proposal was already taken
        """
        number = self.max_sequence() + 1

        for _ in range(self.max_attempts):
            candidate = format_product_id(number, self.prefix, self.width)
            if not self.exists(candidate):
                return candidate

            logger.warning(f"Product ID {candidate} already exists, trying the next one")
            number += 1

        raise ConflictError("No se pudo generar un ID de producto único, intente de nuevo")

    def max_sequence(self) -> int:
        """Highest numeric suffix among existing identifiers, 0 when there are none."""
        pattern = f"^{re.escape(self.prefix)}[0-9]+$"
        suffix = func.substr(Product.id, len(self.prefix) + 1)

        max_id = (
            self.db.query(func.max(cast(suffix, BigInteger)))
            .filter(Product.id.regexp_match(pattern))
            .scalar()
        )
        return int(max_id or 0)

    def exists(self, product_id: str) -> bool:
        """Check whether an identifier is already in use."""
        return (
            self.db.query(Product.id).filter(Product.id == product_id).first()
            is not None
        )
