# backend/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from sqlalchemy import func
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import create_access_token, get_current_user
from utils.audit import write_log, client_ip
from models import users as models
from schemas import user as schemas
from database import get_db

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# Register a new storefront customer
@router.post("/register", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
def register(user: schemas.UserCreate, request: Request, db: Session = Depends(get_db)):
    # Normalize email input
    normalized_email = user.email.strip().lower()

    # Check for existing user
    db_user = db.query(models.User).filter(func.lower(models.User.email) == normalized_email).first()
    if db_user:
        write_log(
            db,
            user_id=None,
            action="REGISTER",
            resource="auth",
            status="FAIL",
            ip=client_ip(request),
            meta={"email": normalized_email, "reason": "Email exists"},
        )
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El correo electrónico ya está registrado")

    # Split the display name into first/last
    first_name, _, last_name = user.name.strip().partition(" ")

    # Create new user instance with hashed password, always as a customer
    new_user = models.User(
        email=normalized_email,
        password_hash=get_password_hash(user.password),
        role=models.CUSTOMER_ROLE,
        first_name=first_name,
        last_name=last_name.strip() or None,
        phone=user.phone,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    # Log successful registration event
    write_log(
        db,
        user_id=new_user.id,
        action="REGISTER",
        resource="auth",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"email": new_user.email},
    )

    return new_user


# Authenticate user and issue JWT token
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.UserLogin, request: Request, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    db_user = db.query(models.User).filter(func.lower(models.User.email) == email).first()

    # Validate credentials and log failure on error
    if not db_user or not verify_password(payload.password, db_user.password_hash):
        write_log(db, user_id=(db_user.id if db_user else None), action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request), meta={"email": email})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Credenciales inválidas")

    # Generate access token
    access_token = create_access_token(data={"sub": db_user.email, "role": db_user.role})

    # Log successful login event
    write_log(db, user_id=db_user.id, action="LOGIN", resource="auth",
              status="SUCCESS", ip=client_ip(request), meta={"email": db_user.email})

    return {"access_token": access_token, "token_type": "bearer"}


# Retrieve current authenticated user details
@router.get("/me", response_model=schemas.UserResponse)
def me(current_user: models.User = Depends(get_current_user)):
    return current_user
