"""
Google Sheets CSV ingestion.

Fetches the CSV export of the daily, weekly and monthly tabs of a client's
spreadsheet and turns each row into the canonical campaign-record fields.
Exports come from Meta Ads Manager in either Portuguese or English, with
Brazilian number formatting ("R$ 1.234,56", "1.234", "05/03/2024").
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import requests
from django.conf import settings
from django.utils import timezone

from .exceptions import InvalidSpreadsheetUrl

logger = logging.getLogger(__name__)

REPORT_TYPES = ('daily', 'weekly', 'monthly')

DEFAULT_CAMPAIGN_NAME = 'Sem nome'

SPREADSHEET_ID_PATTERN = re.compile(r'/spreadsheets/d/([a-zA-Z0-9-_]+)')

# Canonical field -> accepted header labels, Portuguese first, matched lower-cased
COLUMN_ALIASES = {
    'campaign_name': (
        'nome da campanha', 'campanha', 'campaign name', 'campaign_name', 'campaign',
    ),
    'reach': ('alcance', 'reach'),
    'impressions': ('impressões', 'impressoes', 'impressions'),
    'frequency': ('frequência', 'frequencia', 'frequency'),
    'results': ('resultados', 'results', 'actions'),
    'conversations_started': (
        'conversas iniciadas', 'conversas por mensagem iniciadas',
        'messaging conversations started', 'conversations started',
    ),
    'link_clicks': (
        'visitas ao perfil', 'visitas ao perfil do instagram',
        'profile visits', 'instagram profile visits',
    ),
    'amount_spent': (
        'valor investido (r$)', 'valor usado (brl)', 'valor investido', 'valor usado',
        'amount spent (brl)', 'amount spent', 'amount_spent', 'spend',
    ),
    'period_start': (
        'início dos relatórios', 'inicio dos relatorios', 'data de início',
        'reporting starts', 'date_start', 'date',
    ),
    'period_end': (
        'término dos relatórios', 'termino dos relatorios', 'data de término',
        'reporting ends', 'date_stop', 'date_end',
    ),
}

CURRENCY_HEAD = re.compile(r'^R\$\s*\d{1,3}(\.\d{3})*$')
CURRENCY_CENTS = re.compile(r'^\d{2}$')
BR_DATE = re.compile(r'^(\d{1,2})/(\d{1,2})/(\d{4})$')


# --- fetching -------------------------------------------------------------

def extract_spreadsheet_id(url):
    match = SPREADSHEET_ID_PATTERN.search(url or '')
    if not match:
        raise InvalidSpreadsheetUrl('Invalid Google Sheets URL')
    return match.group(1)


def build_export_url(sheet_id, gid):
    return settings.SHEETS_EXPORT_URL.format(sheet_id=sheet_id, gid=gid)


def fetch_tab_csv(url):
    """GET one tab's CSV export. A failed fetch yields '' so the other tabs still sync."""
    logger.info(f"Fetching spreadsheet tab from {url}")
    try:
        response = requests.get(url, timeout=settings.SHEETS_FETCH_TIMEOUT)
    except requests.RequestException as e:
        logger.warning(f"Spreadsheet fetch failed for {url}: {e}")
        return ''

    if not 200 <= response.status_code < 300:
        logger.warning(
            f"Spreadsheet fetch failed for {url}: status {response.status_code}. "
            "The sheet must be shared as 'anyone with the link can view'."
        )
        return ''

    return response.content.decode('utf-8-sig', errors='replace')


def fetch_tabs(sheet_id, tabs):
    """Fetch every configured tab concurrently; returns {report_type: csv_text}."""
    configured = {
        report_type: gid
        for report_type, gid in tabs.items()
        if report_type in REPORT_TYPES and gid not in (None, '')
    }

    with ThreadPoolExecutor(max_workers=len(REPORT_TYPES)) as executor:
        futures = {
            report_type: executor.submit(fetch_tab_csv, build_export_url(sheet_id, gid))
            for report_type, gid in configured.items()
        }
        return {
            report_type: futures[report_type].result() if report_type in futures else ''
            for report_type in REPORT_TYPES
        }


# --- value coercion -------------------------------------------------------

def parse_currency(value):
    """'R$ 1.234,56' -> 1234.56"""
    if not value:
        return 0.0
    cleaned = re.sub(r'R\$|\s', '', value).replace('.', '').replace(',', '.')
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def parse_count(value):
    """Keep digits only: '1.234' -> 1234"""
    digits = re.sub(r'\D', '', value or '')
    return int(digits) if digits else 0


def parse_decimal(value):
    """'1,85' -> 1.85"""
    if not value:
        return 0.0
    cleaned = value.strip().replace('.', '').replace(',', '.')
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def parse_date(value, default=None):
    """'05/03/2024' -> date(2024, 3, 5); anything unreadable falls back to today."""
    value = (value or '').strip()

    match = BR_DATE.match(value)
    if match:
        day, month, year = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            pass
    elif value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            pass

    return default or timezone.localdate()


def clean_campaign_name(value):
    return ' '.join((value or '').split()) or DEFAULT_CAMPAIGN_NAME


NUMERIC_FIELDS = {
    'reach': parse_count,
    'impressions': parse_count,
    'results': parse_count,
    'conversations_started': parse_count,
    'link_clicks': parse_count,
    'amount_spent': parse_currency,
    'frequency': parse_decimal,
}


# --- CSV parsing ----------------------------------------------------------

def _split(line):
    fields = []
    current = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == ',' and not in_quotes:
            fields.append(''.join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append(''.join(current).strip())
    return fields


def split_csv_line(line, expected=None):
    """
    Split one CSV line on unquoted commas.

    Unquoted Brazilian currency values are cut at their decimal comma
    ("R$ 1.234" + "56"); those fragments are glued back together while the
    row has more fields than ``expected`` (always, when ``expected`` is None).
    """
    fields = _split(line)
    surplus = len(fields) - expected if expected is not None else len(fields)

    merged = []
    for field in fields:
        if (surplus > 0 and merged and CURRENCY_CENTS.match(field)
                and CURRENCY_HEAD.match(merged[-1])):
            merged[-1] = f'{merged[-1]},{field}'
            surplus -= 1
        else:
            merged.append(field)
    return merged


def parse_header(line):
    return [cell.replace('\ufeff', '').strip().lower() for cell in _split(line)]


def resolve_columns(header):
    """Map each canonical field to its column index, first matching alias wins."""
    columns = {}
    for field, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in header:
                columns[field] = header.index(alias)
                break
    return columns


def build_row(values, columns, report_type, today=None):
    def cell(field):
        index = columns.get(field)
        if index is None or index >= len(values):
            return ''
        return values[index]

    row = {
        'campaign_name': clean_campaign_name(cell('campaign_name')),
        'report_type': report_type,
        'period_start': parse_date(cell('period_start'), today),
        'period_end': parse_date(cell('period_end'), today),
    }
    for field, parser in NUMERIC_FIELDS.items():
        row[field] = parser(cell(field))
    return row


def parse_csv(text, report_type, today=None):
    lines = (text or '').splitlines()
    if not lines:
        return []

    header = parse_header(lines[0])
    columns = resolve_columns(header)
    logger.debug(f"{report_type} headers {header} resolved to {columns}")

    rows = []
    for raw_line in lines[1:]:
        line = raw_line.strip()
        if not line:
            continue

        values = split_csv_line(line, expected=len(header))
        if len(values) < 3:
            continue

        rows.append(build_row(values, columns, report_type, today))

    return rows


# --- derived metrics ------------------------------------------------------

def derive_metrics(row):
    """Add CPM, CPC, CTR and cost ratios; zero whenever the denominator is zero."""
    spend = row['amount_spent']
    impressions = row['impressions']
    clicks = row['link_clicks']
    results = row['results']
    conversations = row['conversations_started']

    row['cpm'] = spend / impressions * 1000 if impressions else 0.0
    row['cpc'] = spend / clicks if clicks else 0.0
    row['ctr'] = clicks / impressions * 100 if impressions else 0.0
    row['cost_per_result'] = spend / results if results else 0.0
    row['cost_per_conversation'] = spend / conversations if conversations else 0.0
    return row
