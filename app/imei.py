import re


NON_DIGITS_RE = re.compile(r"\D+")

DEFAULT_MIN_DIGITS = 8
DEFAULT_MAX_DIGITS = 20


def extract_imei(
    text: str,
    min_digits: int = DEFAULT_MIN_DIGITS,
    max_digits: int = DEFAULT_MAX_DIGITS,
) -> str | None:
    # Пробелы, дефисы и прочее отбрасываем, контрольную сумму не проверяем
    digits = NON_DIGITS_RE.sub("", text or "")
    if min_digits <= len(digits) <= max_digits:
        return digits
    return None
