from datetime import date, timedelta

from fastapi import FastAPI, HTTPException

app = FastAPI(title="Mock Transaction Server", version="1.0.0")


def _txn(days_ago: int, amount: str, category: str | None):
    return {"date": (date.today() - timedelta(days=days_ago)).isoformat(), "amount": amount, "category": category}


# Personas are generated relative to today so the trend windows stay meaningful
PERSONAS = {
    "user_saver": lambda: [
        _txn(5, "3000.00", "SALARY"),
        _txn(35, "3000.00", "SALARY"),
        _txn(10, "-600.00", "HOUSING"),
        _txn(40, "-600.00", "HOUSING"),
        _txn(12, "-150.00", "ALIMENTATION"),
        _txn(42, "-100.00", "ALIMENTATION"),
    ],
    "user_overspender": lambda: [
        _txn(3, "1000.00", "SALARY"),
        _txn(4, "-1500.00", "RECREATIONAL"),
        _txn(45, "-500.00", "RECREATIONAL"),
    ],
    "user_no_income": lambda: [
        _txn(1, "-20.00", "TRANSPORTATION"),
        _txn(2, "-35.50", None),
    ],
    "user_empty": lambda: [],
}


@app.get("/health")
def health(): return {"status": "ok"}


@app.get("/transactions")
def get_transactions(user_id: str, start: date, end: date):
    persona = PERSONAS.get(user_id)
    if persona is None:
        raise HTTPException(status_code=404, detail="user not found")
    in_period = [t for t in persona() if start <= date.fromisoformat(t["date"]) <= end]
    return {"transactions": in_period}
