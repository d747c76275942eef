from .telescopic import TELESCOPIC_RATES, default_rates

__all__ = ["TELESCOPIC_RATES", "default_rates"]
