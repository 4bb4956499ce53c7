from carsalon.infra.db.models.financing_product import FinancingProductRow
from carsalon.infra.db.models.provider_connection import ProviderConnectionRow

__all__ = ["FinancingProductRow", "ProviderConnectionRow"]
