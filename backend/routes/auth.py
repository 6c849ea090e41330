# backend/routes/auth.py
import logging
import uuid
from datetime import datetime, timedelta
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from models.customer import CustomerProfile, CUSTOMERS_PARTITION
from models.session import ShopperSession
from schemas import user as schemas
from utils.activity_log import log_activity
from utils.errors import StorageFailure
from utils.hashing import verify_password
from utils.tokenJWT import create_access_token, get_current_session, ACCESS_TOKEN_EXPIRE_MINUTES

router = APIRouter(tags=["Auth"])
logger = logging.getLogger(__name__)


def _record_activity(email: str, action: str, timestamp: datetime, duration=None):
    try:
        log_activity(email, action, timestamp, duration)
    except StorageFailure:
        # Already logged by the storage layer; the log is best effort
        return


# Sessions whose token has expired can no longer log out; drop them with their carts
def purge_expired_sessions(db: Session, now: datetime) -> int:
    cutoff = now - timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    purged = (
        db.query(ShopperSession)
        .filter(ShopperSession.login_time < cutoff)
        .delete(synchronize_session=False)
    )
    if purged:
        logger.info(f"Purged {purged} expired shopper session(s)")
    return purged


# Authenticate a customer, open a shopper session and issue its token
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.UserLogin, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    profile = db.get(CustomerProfile, (CUSTOMERS_PARTITION, email))

    if not profile or not verify_password(payload.password, profile.password_hash):
        logger.warning(f"Failed login for {email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    login_time = datetime.utcnow()
    purge_expired_sessions(db, login_time)

    shopper = ShopperSession(
        id=str(uuid.uuid4()),
        customer_email=profile.email,
        customer_name=profile.full_name,
        role=profile.role,
        login_time=login_time,
        cart=[],
        cart_count=0,
    )
    db.add(shopper)
    db.commit()

    _record_activity(profile.email, "Login", login_time)

    access_token = create_access_token(data={"sub": profile.email, "sid": shopper.id, "role": profile.role})
    return {"access_token": access_token, "token_type": "bearer"}


# End the session, logging its duration; the cart goes with it
@router.get("/logout")
def logout(
    db: Session = Depends(get_db),
    shopper: ShopperSession = Depends(get_current_session)
):
    logout_time = datetime.utcnow()
    duration = logout_time - shopper.login_time

    _record_activity(shopper.customer_email, "Logout", logout_time, duration)

    db.delete(shopper)
    db.commit()
    return {"message": "Logged out"}


# Summary of the current session
@router.get("/me", response_model=schemas.SessionInfo)
def me(shopper: ShopperSession = Depends(get_current_session)):
    return schemas.SessionInfo(
        user_name=shopper.customer_name,
        email=shopper.customer_email,
        role=shopper.role,
        login_time=shopper.login_time,
        cart_count=shopper.cart_count,
    )
