from typing import Dict, List

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from discounts import Cart, CartItem, DiscountError, ErrorKind, TimeUnit
from discounts.config import settings
from discounts.logger import get_logger
from discounts.money import ZERO, to_float

logger = get_logger("api")

# Initialize App
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION
)

# --- 1. Response Models ---
# Amounts are rounded to cents and reported as floats.

class PhaseQuote(BaseModel):
    description: str
    discountType: str
    application: str
    totalDiscount: float
    discountsPerBillingCycle: Dict[int, float]
    logs: List[str]

class CartItemQuote(BaseModel):
    skuId: str
    grossTotal: float
    totalDiscount: float
    netTotal: float
    trialDiscount: float = 0.0
    phases: List[PhaseQuote] = Field(default_factory=list)

class CartQuote(BaseModel):
    grossTotal: float
    totalDiscount: float
    netTotal: float
    totalDiscountedUnits: int
    items: List[CartItemQuote]

class TimeUnitInfo(BaseModel):
    name: str
    ordinal: int
    hours: int

# --- 2. Helpers ---

def to_http_error(error: DiscountError) -> HTTPException:
    """Missing items are 404s, every other engine error is the caller's input."""
    status_code = 404 if error.kind == ErrorKind.NOT_FOUND else 400
    return HTTPException(status_code=status_code, detail=error.to_detail())

def quote_item(item: CartItem) -> CartItemQuote:
    """Prices one item. Subscription items also report each phase and the trial."""
    phases = []
    trial_discount = ZERO

    if not item.isSubscription:
        total_discount = item.total_discount()
    else:
        # Same checks as total_discount(), with a single pass over the phases
        item.validate_item()
        results = item.evaluate_phases()
        total_discount = sum((result.total for result in results), ZERO)
        for phase, result in zip(item.subscription.discountPhases, results):
            phases.append(PhaseQuote(
                description=phase.description,
                discountType=phase.discountType.label,
                application=phase.application.value,
                totalDiscount=to_float(result.total),
                discountsPerBillingCycle=phase.discountsPerBillingCycle,
                logs=phase.logs,
            ))
        trial_discount = item.trial_discount()

    gross = item.gross_total()
    return CartItemQuote(
        skuId=item.skuId,
        grossTotal=to_float(gross),
        totalDiscount=to_float(total_discount),
        netTotal=to_float(gross - total_discount),
        trialDiscount=to_float(trial_discount),
        phases=phases,
    )

# --- 3. API Endpoints ---

@app.get("/time-units", response_model=List[TimeUnitInfo])
def list_time_units():
    """Debug endpoint listing every unit with its ordinal and hour count."""
    return [TimeUnitInfo(name=unit.label, ordinal=int(unit), hours=unit.hours) for unit in TimeUnit]

@app.post("/cart-items/quote", response_model=CartItemQuote)
def quote_cart_item(item: CartItem):
    """Gross, discount and net totals for a single line item."""
    try:
        return quote_item(item)
    except DiscountError as e:
        logger.info("Rejected quote for '%s': %s", item.skuId, e)
        raise to_http_error(e)

@app.post("/carts/quote", response_model=CartQuote)
def quote_cart(cart: Cart):
    """
    Totals for a whole cart.
    Items sharing a SKU are merged the same way Cart.add_item merges them.
    """
    merged = Cart()
    try:
        for item in cart.items():
            merged.add_item(item)
        quotes = [quote_item(item) for item in merged.items()]
        return CartQuote(
            grossTotal=to_float(merged.total_gross()),
            totalDiscount=to_float(merged.total_discount()),
            netTotal=to_float(merged.total_net()),
            totalDiscountedUnits=merged.total_discounted_units(),
            items=quotes,
        )
    except DiscountError as e:
        logger.info("Rejected cart quote: %s", e)
        raise to_http_error(e)
