import logging
import unicodedata
from pathlib import Path

from openpyxl import load_workbook
from sqlalchemy.exc import SQLAlchemyError

from app.database import SessionLocal
from app.services.product_service import batch_create_products, validate_batch_item

logger = logging.getLogger(__name__)

_ALIAS_SPECS = (
    (("description",), "description"),
    (("descricao",), "description"),
    (("produto",), "description"),
    (("insumo",), "description"),
    (("item",), "description"),
    (("unit",), "unit"),
    (("unidade",), "unit"),
    (("un",), "unit"),
    (("und",), "unit"),
    (("unit", "price"), "unitPrice"),
    (("preco",), "unitPrice"),
    (("preco", "unitario"), "unitPrice"),
    (("valor",), "unitPrice"),
    (("valor", "unitario"), "unitPrice"),
    (("price",), "unitPrice"),
)

HEADER_ALIASES = {"".join(parts): target for parts, target in _ALIAS_SPECS}

REQUIRED_COLUMNS = {"description", "unit", "unitPrice"}


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _strip_accents(value):
    normalized = unicodedata.normalize("NFKD", value)
    return "".join(char for char in normalized if not unicodedata.combining(char))


def normalize_header(value):
    if value is None:
        return ""
    value_text = _strip_accents(str(value).strip().lower())
    if not value_text:
        return ""
    for char in (" ", "-", ".", "/", "(", ")"):
        value_text = value_text.replace(char, "_")
    value_text = "_".join(part for part in value_text.split("_") if part)
    alias = HEADER_ALIASES.get(value_text.replace("_", ""))
    if alias:
        return alias
    return value_text


def parse_price(value):
    """Accept numbers and Brazilian-formatted text such as "R$ 1.234,50"."""
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        raise ValueError("unitPrice must be a number")
    if isinstance(value, (int, float)):
        return float(value)
    value_text = str(value).strip().replace("R$", "").replace(" ", "")
    if "," in value_text:
        value_text = value_text.replace(".", "").replace(",", ".")
    try:
        return float(value_text)
    except ValueError:
        raise ValueError(f"unitPrice must be a number: {value!r}") from None


def _clean_text(value):
    if _is_blank(value):
        return None
    return str(value).strip()


def load_product_rows(worksheet):
    rows_iter = worksheet.iter_rows(values_only=True)
    headers = next(rows_iter, None)
    if not headers:
        return [], set()
    header_keys = [normalize_header(header) for header in headers]
    indices = [(idx, key) for idx, key in enumerate(header_keys) if key in REQUIRED_COLUMNS]
    columns = {key for _, key in indices}

    rows = []
    for row in rows_iter:
        if row is None or all(_is_blank(value) for value in row):
            continue
        record = {}
        for idx, key in indices:
            value = row[idx] if idx < len(row) else None
            if key == "unitPrice":
                try:
                    record[key] = parse_price(value)
                except ValueError:
                    record[key] = value
            else:
                record[key] = _clean_text(value)
        rows.append({key: value for key, value in record.items() if value is not None})
    return rows, columns


def validate_columns(columns):
    missing = sorted(REQUIRED_COLUMNS - set(columns))
    if missing:
        raise ValueError("sheet missing columns: {}".format(", ".join(missing)))


def preview_rows(rows):
    results = []
    for index, raw in enumerate(rows):
        item, reason = validate_batch_item(raw)
        if item is None:
            results.append({"index": index, "status": "rejected", "reason": reason})
        else:
            results.append({"index": index, "status": "accepted"})
    created = sum(1 for result in results if result["status"] == "accepted")
    return {"total": len(rows), "created": created, "results": results}


def import_workbook(workbook_path, sheet=None, dry_run=False, session_factory=SessionLocal):
    workbook_path = Path(workbook_path)
    if not workbook_path.exists():
        raise FileNotFoundError(f"File not found: {workbook_path}")
    if workbook_path.suffix.lower() != ".xlsx":
        raise ValueError("Only .xlsx files are supported.")

    workbook = load_workbook(workbook_path, data_only=True, read_only=True)
    try:
        if sheet:
            if sheet not in workbook.sheetnames:
                raise ValueError(f"Sheet not found: {sheet}")
            worksheet = workbook[sheet]
        else:
            worksheet = workbook[workbook.sheetnames[0]]
        rows, columns = load_product_rows(worksheet)
    finally:
        workbook.close()

    validate_columns(columns)
    logger.info("Loaded %s product rows from %s", len(rows), workbook_path.name)

    if dry_run:
        return preview_rows(rows)

    db = session_factory()
    try:
        return batch_create_products(db, rows)
    except SQLAlchemyError:
        logger.exception("Product import from %s failed", workbook_path.name)
        raise
    finally:
        db.close()


__all__ = [
    "import_workbook",
    "load_product_rows",
    "normalize_header",
    "parse_price",
    "preview_rows",
    "validate_columns",
]
