from linkshortener.models.link_model import LinkModel
from linkshortener.models.rate_window_model import RateWindowModel, AdmitDecision
from linkshortener.models.click_event_model import ClickEventModel


__all__ = [
    'LinkModel',
    'RateWindowModel',
    'AdmitDecision',
    'ClickEventModel',
]
