from decimal import Decimal, ROUND_HALF_UP

DEFAULT_RATE = Decimal('0.10')
UNIT = Decimal('1')

def round_currency(amount) -> int:
    return int(Decimal(str(amount)).quantize(UNIT, rounding=ROUND_HALF_UP))

def calc_commission(deposit, percentage, rate=DEFAULT_RATE) -> int:
    """Comisión sobre un abono.

    El abono se reduce primero por el porcentaje del tipo de pago y luego se
    toma `rate` (10%) del resto, redondeado a la unidad. Sin abono, o con un
    tipo de pago sin resolver (`percentage` None), la comisión es 0.
    """
    if not deposit or percentage is None:
        return 0
    net = Decimal(str(deposit)) * (1 - Decimal(str(percentage)) / 100)
    return round_currency(net * Decimal(str(rate)))

def commission_for(deposit, payment_type, rate=DEFAULT_RATE) -> int:
    percentage = payment_type.percentage if payment_type is not None else None
    return calc_commission(deposit, percentage, rate)
