import logging

from grocery.models.product import sample_products

logger = logging.getLogger(__name__)

async def reset_catalog(store) -> int:
    """Clear the catalog and reseed it with the demo products"""
    documents = [product.to_document() for product in sample_products()]
    await store.reset(documents)
    logger.info(f"Catalog reset with {len(documents)} sample products")
    return len(documents)
