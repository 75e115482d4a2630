from flask import Blueprint, jsonify, send_file
from flask_login import login_required
from datetime import datetime, timedelta
import io
import logging
import pandas as pd
from core.access import permission_required
from core import reporting
from models import Sale, Deposit, Appointment, Commission, User

reports_bp = Blueprint('reports', __name__, url_prefix='/reports')
logger = logging.getLogger(__name__)

def _worker_names():
    return {u.id: u.display_name() for u in User.query.all()}

def _worker_label(worker_id, names):
    if worker_id == reporting.UNASSIGNED:
        return 'Trabajador sin asignar'
    return names.get(worker_id, f'Trabajador {worker_id}')

def _summary(sales, deposits):
    return {
        'total_sales': reporting.total_sales(sales),
        'total_deposits': reporting.total_deposits(deposits),
        'average_sale_value': reporting.average_sale_value(sales),
        'percent_paid': reporting.percent_paid(sales, deposits),
        'sales_count': len(reporting.assigned_sales(sales))
    }

def _monthly(sales, deposits, appointments):
    return [{
        'month': reporting.month_label(key),
        'sales': values['sales'],
        'deposits': values['deposits'],
        'pending': values['pending']
    } for key, values in reporting.monthly_summary(appointments, sales, deposits).items()]

def _workers(sales, names):
    totals = reporting.per_worker_sales(sales)
    return [{
        'worker_id': None if worker_id == reporting.UNASSIGNED else worker_id,
        'worker_name': _worker_label(worker_id, names),
        'total': total
    } for worker_id, total in sorted(totals.items(), key=lambda item: -item[1])]

def _commissions(commissions, names):
    return [{
        'employee_id': None if employee_id == reporting.UNASSIGNED else employee_id,
        'employee_name': _worker_label(employee_id, names),
        'total': total
    } for employee_id, total in reporting.per_employee_commissions(commissions)]

@reports_bp.route('/api/summary')
@login_required
@permission_required('view_reports')
def api_summary():
    return jsonify(_summary(Sale.query.all(), Deposit.query.all()))

@reports_bp.route('/api/monthly')
@login_required
@permission_required('view_reports')
def api_monthly():
    return jsonify(_monthly(Sale.query.all(), Deposit.query.all(), Appointment.query.all()))

@reports_bp.route('/api/workers')
@login_required
@permission_required('view_reports')
def api_workers():
    return jsonify(_workers(Sale.query.all(), _worker_names()))

@reports_bp.route('/api/commissions')
@login_required
@permission_required('view_reports')
def api_commissions():
    return jsonify(_commissions(Commission.query.all(), _worker_names()))

@reports_bp.route('/api/deposits_last_30_days')
@login_required
@permission_required('view_reports')
def api_deposits_last_30_days():
    today = datetime.utcnow().date()
    start_date = today - timedelta(days=29)
    deposits = (
        Deposit.query
        .filter(Deposit.date >= start_date)
        .order_by(Deposit.date)
        .all()
    )
    # abonos agrupados por día
    deposits_by_day = {}
    for i in range(30):
        day = start_date + timedelta(days=i)
        deposits_by_day[day.strftime('%Y-%m-%d')] = 0
    for deposit in deposits:
        day = deposit.date.date().strftime('%Y-%m-%d')
        if day in deposits_by_day:
            deposits_by_day[day] += deposit.amount
    return jsonify({'labels': list(deposits_by_day.keys()), 'data': list(deposits_by_day.values())})

@reports_bp.route('/export/excel')
@login_required
@permission_required('view_reports')
def export_excel():
    """Exporta los reportes a un archivo Excel."""
    sales = Sale.query.all()
    deposits = Deposit.query.all()
    appointments = Appointment.query.all()
    names = _worker_names()
    summary = _summary(sales, deposits)

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine='xlsxwriter') as writer:
        workbook = writer.book
        header_format = workbook.add_format({
            'bold': True,
            'valign': 'top',
            'fg_color': '#D7E4BC',
            'border': 1,
            'align': 'center'
        })
        currency_format = workbook.add_format({'num_format': '$#,##0', 'border': 1})

        sheets = {
            'Resumen': pd.DataFrame([
                ['Ventas totales', summary['total_sales']],
                ['Abonos totales', summary['total_deposits']],
                ['Valor promedio de venta', summary['average_sale_value']],
                ['Porcentaje abonado', round(summary['percent_paid'], 2)],
            ], columns=['Indicador', 'Valor']),
            'Mensual': pd.DataFrame(
                [[m['month'], m['sales'], m['deposits'], m['pending']] for m in _monthly(sales, deposits, appointments)],
                columns=['Mes', 'Ventas', 'Abonos', 'Pendiente']
            ),
            'Por trabajador': pd.DataFrame(
                [[w['worker_name'], w['total']] for w in _workers(sales, names)],
                columns=['Trabajador', 'Ventas']
            ),
            'Comisiones': pd.DataFrame(
                [[c['employee_name'], c['total']] for c in _commissions(Commission.query.all(), names)],
                columns=['Trabajador', 'Comisión']
            ),
        }
        for sheet_name, df in sheets.items():
            df.to_excel(writer, sheet_name=sheet_name, index=False)
            worksheet = writer.sheets[sheet_name]
            for col_num, value in enumerate(df.columns.values):
                worksheet.write(0, col_num, value, header_format)
            worksheet.set_column(0, 0, 28)
            worksheet.set_column(1, len(df.columns) - 1, 16, currency_format)

    output.seek(0)
    logger.info("Reports exported to Excel")
    return send_file(
        output,
        as_attachment=True,
        download_name=f'reporte_{datetime.now():%Y%m%d_%H%M%S}.xlsx',
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
