from app.models.caller import CallerIdentity
from app.models.loan import Loan

__all__ = [
    "CallerIdentity",
    "Loan",
]
