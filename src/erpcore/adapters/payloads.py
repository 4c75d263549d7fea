"""Pydantic request models turning raw JSON payloads into aggregate DTOs.

Transport layers hand the parsed JSON body to one of the ``parse_*`` functions;
the resulting :class:`AggregateCreate` / :class:`AggregateUpdate` is what the
orchestrators consume. Scalars are type-checked here, so malformed input fails
with ``ValidationError`` before a transaction opens. Only the keys a client
actually sent are passed on; field allowlisting is left to the orchestrators.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from erpcore.domain.aggregates import (
    PRODUCT_DISCOUNT_RANGES,
    PRODUCT_DISCOUNTS,
    PRODUCT_INPUTS,
    PRODUCT_PROCESSES,
    AggregateCreate,
    AggregateUpdate,
)
from erpcore.domain.model import DECIMAL_PRECISION, DECIMAL_SCALE
from erpcore.domain.reconciliation import (
    ByInlineDefinition,
    ByReference,
    ItemUpdate,
    NewItem,
    ReconciliationIntent,
)

# finer values would be rounded by storage and never compare equal again
Amount = Annotated[
    Decimal,
    Field(max_digits=DECIMAL_PRECISION, decimal_places=DECIMAL_SCALE, allow_inf_nan=False),
]
Percentage = Annotated[Amount, Field(ge=0, le=100)]


def _reject_null(value: object) -> object:
    if value is None:
        raise ValueError("may not be null")
    return value


class _Body(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    def body(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class _Existing(_Body):
    id: int

    def to_update(self) -> ItemUpdate:
        return ItemUpdate(id=self.id, fields=self.model_dump(exclude_unset=True, exclude={"id"}))


# Roots -----------------------------------------------------------------------


class ProductBody(_Body):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    custom_id: str | None = Field(default=None, max_length=64)
    sku: str | None = Field(default=None, max_length=64)
    barcode: str | None = Field(default=None, max_length=64)
    description: str | None = None
    storage_conditions: str | None = None
    unit_of_measure: str | None = Field(default=None, max_length=64)
    presentation: str | None = Field(default=None, max_length=255)
    type: str | None = Field(default=None, max_length=64)
    production_cost: Amount | None = None
    sale_price: Amount | None = None
    is_active: bool | None = None
    is_draft: bool | None = None
    photo: str | None = Field(default=None, max_length=512)

    _not_null = field_validator("name", "is_active", "is_draft")(_reject_null)

    @field_validator("barcode", mode="before")
    @classmethod
    def _barcode_as_text(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class NewProductBody(ProductBody):
    name: str = Field(min_length=1, max_length=255)  # pyright: ignore[reportIncompatibleVariableOverride]


class ClientBody(_Body):
    company_name: str | None = Field(default=None, min_length=1, max_length=255)
    tax_id: str | None = Field(default=None, max_length=32)
    cfdi: str | None = Field(default=None, max_length=64)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=32)
    street: str | None = Field(default=None, max_length=255)
    street_number: int | None = None
    neighborhood: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=128)
    state: str | None = Field(default=None, max_length=128)
    country: str | None = Field(default=None, max_length=128)
    zip_code: int | None = None
    payment_terms: str | None = Field(default=None, max_length=128)
    payment_method: str | None = Field(default=None, max_length=128)
    tax_regimen: str | None = Field(default=None, max_length=128)
    credit_limit: Amount | None = None
    is_active: bool | None = None

    _not_null = field_validator("company_name", "is_active")(_reject_null)


class NewClientBody(ClientBody):
    company_name: str = Field(min_length=1, max_length=255)  # pyright: ignore[reportIncompatibleVariableOverride]


# Collection items ------------------------------------------------------------


class ProductInputFields(_Body):
    input_id: int | None = None
    equivalence: Amount | None = None

    _not_null = field_validator("input_id")(_reject_null)


class NewProductInput(ProductInputFields):
    input_id: int  # pyright: ignore[reportIncompatibleVariableOverride]


class ProductInputUpdate(ProductInputFields, _Existing):
    pass


class DiscountRangeFields(_Body):
    min_qty: int | None = Field(default=None, ge=0)
    max_qty: int | None = Field(default=None, ge=0)
    unit_price: Amount | None = None

    _not_null = field_validator("min_qty", "max_qty")(_reject_null)

    @model_validator(mode="after")
    def _ordered_bounds(self) -> DiscountRangeFields:
        if self.min_qty is not None and self.max_qty is not None and self.min_qty > self.max_qty:
            raise ValueError("min_qty must not exceed max_qty")
        return self


class NewDiscountRange(DiscountRangeFields):
    min_qty: int = Field(ge=0)  # pyright: ignore[reportIncompatibleVariableOverride]
    max_qty: int = Field(ge=0)  # pyright: ignore[reportIncompatibleVariableOverride]


class DiscountRangeUpdate(DiscountRangeFields, _Existing):
    pass


class ProductDiscountFields(_Body):
    product_id: int | None = None
    discount_percentage: Percentage | None = None

    _not_null = field_validator("product_id")(_reject_null)


class NewProductDiscount(ProductDiscountFields):
    product_id: int  # pyright: ignore[reportIncompatibleVariableOverride]


class ProductDiscountUpdate(ProductDiscountFields, _Existing):
    pass


class ProcessDefinition(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None


class ProcessStep(_Body):
    """Process step referencing an existing process or defining a new one inline."""

    sort_order: int
    process_id: int | None = None
    process: ProcessDefinition | None = None

    @model_validator(mode="after")
    def _exactly_one_target(self) -> ProcessStep:
        if (self.process_id is None) == (self.process is None):
            raise ValueError("a process step needs exactly one of process_id or process")
        return self

    def to_new_item(self) -> NewItem:
        reference: ByReference | ByInlineDefinition
        if self.process is not None:
            reference = ByInlineDefinition(
                name=self.process.name, description=self.process.description
            )
        elif self.process_id is not None:
            reference = ByReference(self.process_id)
        else:
            raise ValueError("process step without a target")
        return NewItem(
            fields=self.model_dump(exclude_unset=True, exclude={"process", "process_id"}),
            reference=reference,
        )


class ProcessStepUpdate(_Existing):
    sort_order: int | None = None
    process_id: int | None = None

    _not_null = field_validator("sort_order", "process_id")(_reject_null)


# Collection managers ---------------------------------------------------------


class DeletedItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int


class _CollectionManager(BaseModel):
    model_config = ConfigDict(extra="ignore")

    deleted: list[DeletedItem] = Field(default_factory=list)

    def _intent(self, added: list[NewItem], updated: Sequence[_Existing]) -> ReconciliationIntent:
        return ReconciliationIntent(
            added=added,
            updated=[item.to_update() for item in updated],
            deleted=[item.id for item in self.deleted],
        )


class ProductInputsManager(_CollectionManager):
    added: list[NewProductInput] = Field(default_factory=list)
    updated: list[ProductInputUpdate] = Field(default_factory=list)

    def to_intent(self) -> ReconciliationIntent:
        return self._intent([_new_item(item) for item in self.added], self.updated)


class ProcessStepsManager(_CollectionManager):
    added: list[ProcessStep] = Field(default_factory=list)
    updated: list[ProcessStepUpdate] = Field(default_factory=list)

    def to_intent(self) -> ReconciliationIntent:
        return self._intent([step.to_new_item() for step in self.added], self.updated)


class DiscountRangesManager(_CollectionManager):
    added: list[NewDiscountRange] = Field(default_factory=list)
    updated: list[DiscountRangeUpdate] = Field(default_factory=list)

    def to_intent(self) -> ReconciliationIntent:
        return self._intent([_new_item(item) for item in self.added], self.updated)


class ProductDiscountsManager(_CollectionManager):
    added: list[NewProductDiscount] = Field(default_factory=list)
    updated: list[ProductDiscountUpdate] = Field(default_factory=list)

    def to_intent(self) -> ReconciliationIntent:
        return self._intent([_new_item(item) for item in self.added], self.updated)


def _new_item(item: _Body) -> NewItem:
    return NewItem(fields=item.body())


# Requests --------------------------------------------------------------------


class ProductCreateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    product: NewProductBody
    product_inputs: list[NewProductInput] = Field(default_factory=list)
    product_processes: list[ProcessStep] = Field(default_factory=list)
    product_discount_ranges: list[NewDiscountRange] = Field(default_factory=list)


class ProductUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    product: ProductBody = Field(default_factory=ProductBody)
    product_inputs_manager: ProductInputsManager | None = None
    product_processes_manager: ProcessStepsManager | None = None
    product_discount_ranges_manager: DiscountRangesManager | None = None


class ClientCreateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    client: NewClientBody
    product_discounts: list[NewProductDiscount] = Field(default_factory=list)


class ClientUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    client: ClientBody = Field(default_factory=ClientBody)
    product_discounts_manager: ProductDiscountsManager | None = None


def parse_product_create(raw: Any) -> AggregateCreate:
    request = ProductCreateRequest.model_validate(raw)
    return AggregateCreate(
        fields=request.product.body(),
        collections={
            PRODUCT_INPUTS.name: [_new_item(item) for item in request.product_inputs],
            PRODUCT_PROCESSES.name: [step.to_new_item() for step in request.product_processes],
            PRODUCT_DISCOUNT_RANGES.name: [
                _new_item(item) for item in request.product_discount_ranges
            ],
        },
    )


def parse_product_update(raw: Any) -> AggregateUpdate:
    request = ProductUpdateRequest.model_validate(raw)
    intents = {
        PRODUCT_INPUTS.name: request.product_inputs_manager,
        PRODUCT_PROCESSES.name: request.product_processes_manager,
        PRODUCT_DISCOUNT_RANGES.name: request.product_discount_ranges_manager,
    }
    return AggregateUpdate(
        fields=request.product.body(),
        collections={
            name: manager.to_intent() for name, manager in intents.items() if manager is not None
        },
    )


def parse_client_create(raw: Any) -> AggregateCreate:
    request = ClientCreateRequest.model_validate(raw)
    return AggregateCreate(
        fields=request.client.body(),
        collections={
            PRODUCT_DISCOUNTS.name: [_new_item(item) for item in request.product_discounts]
        },
    )


def parse_client_update(raw: Any) -> AggregateUpdate:
    request = ClientUpdateRequest.model_validate(raw)
    collections: dict[str, ReconciliationIntent] = {}
    if request.product_discounts_manager is not None:
        collections[PRODUCT_DISCOUNTS.name] = request.product_discounts_manager.to_intent()
    return AggregateUpdate(fields=request.client.body(), collections=collections)
