from dualstore.utils.helpers import as_utc, utc_now

__all__ = ["as_utc", "utc_now"]
