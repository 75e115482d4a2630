"""Agregados para los paneles de reportes.

Funciones puras sobre colecciones ya cargadas: reciben modelos o diccionarios
y no consultan la base de datos. El orden de la entrada no cambia el
resultado.
"""
from collections import defaultdict, OrderedDict
from datetime import datetime, date

UNASSIGNED = 'unassigned'

def _get(record, name, default=None):
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)

def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value)[:10]).date()

def month_key(value):
    day = _as_date(value)
    return (day.month, day.year)

def month_label(key):
    return f'{key[0]}/{key[1]}'

def assigned_sales(sales):
    return [s for s in sales if _get(s, 'worker_id') is not None]

def total_sales(sales):
    return sum(_get(s, 'total_price', 0) or 0 for s in assigned_sales(sales))

def average_sale_value(sales):
    counted = assigned_sales(sales)
    if not counted:
        return 0
    return total_sales(counted) / len(counted)

def total_deposits(deposits):
    return sum(_get(d, 'amount', 0) or 0 for d in deposits)

def percent_paid(sales, deposits):
    total = total_sales(sales)
    if total <= 0:
        return 0
    return total_deposits(deposits) / total * 100

def monthly_sales(appointments, sales):
    """Suma el precio de la venta de cada cita en el mes de la cita.

    Una venta con varias citas suma una vez por cita. Las citas sin venta
    conocida no aportan.
    """
    prices = {_get(s, 'id'): _get(s, 'total_price', 0) or 0 for s in sales}
    result = defaultdict(float)
    for appointment in appointments:
        sale_id = _get(appointment, 'sale_id')
        if sale_id is None or sale_id not in prices:
            continue
        result[month_key(_get(appointment, 'service_date'))] += prices[sale_id]
    return dict(result)

def monthly_deposits(deposits):
    result = defaultdict(float)
    for deposit in deposits:
        result[month_key(_get(deposit, 'date'))] += _get(deposit, 'amount', 0) or 0
    return dict(result)

def monthly_summary(appointments, sales, deposits):
    """Ventas, abonos y saldo pendiente por mes, ordenado cronológicamente."""
    by_sales = monthly_sales(appointments, sales)
    by_deposits = monthly_deposits(deposits)
    keys = sorted(set(by_sales) | set(by_deposits), key=lambda k: (k[1], k[0]))
    summary = OrderedDict()
    for key in keys:
        sold = by_sales.get(key, 0)
        paid = by_deposits.get(key, 0)
        summary[key] = {'sales': sold, 'deposits': paid, 'pending': max(0, sold - paid)}
    return summary

def per_worker_sales(sales):
    result = defaultdict(float)
    for sale in sales:
        worker_id = _get(sale, 'worker_id')
        result[UNASSIGNED if worker_id is None else worker_id] += _get(sale, 'total_price', 0) or 0
    return dict(result)

def per_employee_commissions(commissions):
    """Lista de (employee_id, total) de mayor a menor."""
    totals = defaultdict(float)
    for commission in commissions:
        employee_id = _get(commission, 'employee_id')
        totals[UNASSIGNED if employee_id is None else employee_id] += _get(commission, 'amount', 0) or 0
    return sorted(totals.items(), key=lambda item: (-item[1], str(item[0])))

def scheduled_date_counts(appointments):
    counts = defaultdict(int)
    for appointment in appointments:
        counts[_as_date(_get(appointment, 'service_date')).strftime('%Y-%m-%d')] += 1
    return dict(sorted(counts.items()))
