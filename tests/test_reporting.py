from datetime import date, datetime

from core import reporting


def test_average_sale_value_of_empty_set_is_zero():
    assert reporting.average_sale_value([]) == 0


def test_average_sale_value():
    sales = [
        {'id': 1, 'worker_id': 1, 'total_price': 100},
        {'id': 2, 'worker_id': 2, 'total_price': 200},
        {'id': 3, 'worker_id': 1, 'total_price': 300},
    ]
    assert reporting.average_sale_value(sales) == 200


def test_total_sales_ignores_unassigned_sales():
    sales = [
        {'worker_id': 1, 'total_price': 100},
        {'worker_id': None, 'total_price': 999},
    ]
    assert reporting.total_sales(sales) == 100


def test_per_worker_sales_groups_unassigned():
    sales = [
        {'worker_id': 1, 'total_price': 50},
        {'worker_id': 1, 'total_price': 30},
        {'worker_id': None, 'total_price': 20},
    ]
    assert reporting.per_worker_sales(sales) == {1: 80, 'unassigned': 20}


def test_monthly_sales_uses_appointment_month_and_skips_unknown_sales():
    sales = [{'id': 1, 'worker_id': 1, 'total_price': 1000}, {'id': 2, 'worker_id': 1, 'total_price': 500}]
    appointments = [
        {'sale_id': 1, 'service_date': date(2024, 3, 5)},
        {'sale_id': 1, 'service_date': date(2024, 4, 2)},
        {'sale_id': 2, 'service_date': '2024-03-20'},
        {'sale_id': 99, 'service_date': date(2024, 3, 1)},
        {'sale_id': None, 'service_date': date(2024, 3, 1)},
    ]
    assert reporting.monthly_sales(appointments, sales) == {(3, 2024): 1500, (4, 2024): 1000}


def test_monthly_summary_computes_pending_and_sorts_by_month():
    sales = [{'id': 1, 'worker_id': 1, 'total_price': 1000}]
    appointments = [{'sale_id': 1, 'service_date': date(2024, 2, 10)}]
    deposits = [
        {'amount': 300, 'date': datetime(2024, 2, 1, 10, 0)},
        {'amount': 200, 'date': datetime(2023, 12, 24, 18, 30)},
    ]
    summary = reporting.monthly_summary(appointments, sales, deposits)
    assert list(summary) == [(12, 2023), (2, 2024)]
    assert summary[(2, 2024)] == {'sales': 1000, 'deposits': 300, 'pending': 700}
    assert summary[(12, 2023)] == {'sales': 0, 'deposits': 200, 'pending': 0}


def test_per_employee_commissions_sorted_descending():
    commissions = [
        {'employee_id': 1, 'amount': 10},
        {'employee_id': 2, 'amount': 45},
        {'employee_id': 1, 'amount': 5},
        {'employee_id': 3, 'amount': 20},
    ]
    assert reporting.per_employee_commissions(commissions) == [(2, 45), (3, 20), (1, 15)]


def test_percent_paid():
    sales = [{'worker_id': 1, 'total_price': 2000}]
    deposits = [{'amount': 500}, {'amount': 500}]
    assert reporting.percent_paid(sales, deposits) == 50
    assert reporting.percent_paid([], deposits) == 0


def test_folds_do_not_depend_on_order():
    sales = [
        {'id': 1, 'worker_id': 2, 'total_price': 70},
        {'id': 2, 'worker_id': None, 'total_price': 10},
        {'id': 3, 'worker_id': 1, 'total_price': 40},
    ]
    reversed_sales = list(reversed(sales))
    assert reporting.per_worker_sales(sales) == reporting.per_worker_sales(reversed_sales)
    assert reporting.total_sales(sales) == reporting.total_sales(reversed_sales)


def test_scheduled_date_counts():
    appointments = [
        {'service_date': date(2024, 5, 1)},
        {'service_date': date(2024, 5, 1)},
        {'service_date': '2024-05-03'},
    ]
    assert reporting.scheduled_date_counts(appointments) == {'2024-05-01': 2, '2024-05-03': 1}
