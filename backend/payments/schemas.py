# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the payment endpoints.

The storefront speaks camelCase here (``totalAmount``, ``orderId``,
``clientSecret``); the Python side keeps snake_case names.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class PaymentIntentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Major currency units (e.g. rupees); scaled to minor units server-side
    total_amount: Decimal = Field(gt=0, alias="totalAmount")
    order_id: int = Field(alias="orderId")


class PaymentIntentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_secret: str = Field(serialization_alias="clientSecret")
