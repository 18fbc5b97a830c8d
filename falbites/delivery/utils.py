import secrets

from .models import PayoutTransaction


def generate_transaction_id():
    """``TRX`` followed by six digits, unique among payouts"""
    while True:
        transaction_id = f"TRX{100000 + secrets.randbelow(900000)}"
        if not PayoutTransaction.objects.filter(transaction_id=transaction_id).exists():
            return transaction_id
