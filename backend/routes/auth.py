# backend/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas.user import Token, UserLogin, UserResponse
from utils.audit import client_ip, write_log
from utils.hashing import verify_password
from utils.tokenJWT import create_access_token, get_current_user

router = APIRouter(tags=["Auth"])


# Admin panel sign-in; every attempt lands in the audit log
@router.post("/login", response_model=Token)
def login(payload: UserLogin, request: Request, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    user = db.query(User).filter(func.lower(User.email) == email).first()

    if not user or not verify_password(payload.password, user.password_hash):
        write_log(db, user_id=user.id if user else None, action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request), meta={"email": email})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    if not user.is_active:
        write_log(db, user_id=user.id, action="LOGIN", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": email, "reason": "inactive"})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account disabled")

    token = create_access_token(data={"sub": user.email, "role": user.role})
    write_log(db, user_id=user.id, action="LOGIN", resource="auth",
              ip=client_ip(request), meta={"email": user.email})
    return Token(access_token=token)


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
