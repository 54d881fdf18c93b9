import logging

from fastapi import Depends

from grocery.core.config import Settings, get_settings
from grocery.core.errors import InconsistentAggregate, ProductNotFound
from grocery.db.pipeline import AVERAGE_FIELD, average_rating_pipeline
from grocery.db.session import get_store
from grocery.db.store import CatalogUnitOfWork
from grocery.models.rating import RatingResult, RatingSubmission

logger = logging.getLogger(__name__)

class RatingEngine:
    """Appends ratings to products and keeps their stored average current.

    The append, the recompute and the average update share one transaction,
    so a product is only ever seen with its old ratings and old average or
    with the new rating included in both.
    """

    def __init__(self, store, upsert_unknown_products: bool = True):
        self.store = store
        # An unknown PLU silently gets a new product document, with no
        # Description, when upserting. Disable to reject it instead.
        self.upsert_unknown_products = upsert_unknown_products

    async def _apply(self, uow: CatalogUnitOfWork, submission: RatingSubmission) -> float:
        plu = submission.plu
        if not self.upsert_unknown_products and await uow.find_product(plu) is None:
            raise ProductNotFound(plu)

        await uow.push_rating(plu, submission.rating, upsert=self.upsert_unknown_products)

        rows = await uow.aggregate(average_rating_pipeline(plu))
        # The match is on a unique key so there is at most one group
        if not rows or rows[0].get(AVERAGE_FIELD) is None:
            raise InconsistentAggregate(plu)
        average = float(rows[0][AVERAGE_FIELD])

        await uow.set_average(plu, average)
        return average

    async def submit(self, submission: RatingSubmission) -> RatingResult:
        average = await self.store.run_in_transaction(
            lambda uow: self._apply(uow, submission)
        )
        logger.info(f"Added rating {submission.rating} to PLU {submission.plu}, average now {average}")
        return RatingResult(plu=submission.plu, rating=submission.rating, average=average)

def get_rating_engine(
    store=Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> RatingEngine:
    return RatingEngine(store, upsert_unknown_products=settings.UPSERT_UNKNOWN_PRODUCTS)
