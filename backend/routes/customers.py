# backend/routes/customers.py
import logging
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.customer import CustomerProfile, CUSTOMERS_PARTITION, ROLE_ADMIN, ROLE_CUSTOMER
from schemas.user import CustomerCreate, CustomerResponse, CustomerFiles
from utils.activity_log import read_activity_log
from utils.errors import StorageFailure, ValidationFailed
from utils.hashing import get_password_hash
from utils.storage import (
    BlobContainer, ShareDirectory, CUSTOMER_IMAGES, CUSTOMER_FILES_SHARE, ORDER_FILES
)
from utils.tokenJWT import role_required

router = APIRouter(prefix="/customers", tags=["Customers"])
logger = logging.getLogger(__name__)

PROFILES_DIRECTORY = "profiles"
NO_LOGS = "No logs available."

admin_only = role_required(ROLE_ADMIN)


# Register a customer profile with an optional image; a JSON copy goes to the file share
@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def add_customer_profile(
    name: str = Form(...),
    surname: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    phone_number: str = Form(""),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    try:
        data = CustomerCreate(name=name, surname=surname, email=email, password=password, phone_number=phone_number)
    except ValidationError as e:
        logger.warning(f"Rejected customer profile for {email}: {e.error_count()} invalid field(s)")
        raise ValidationFailed("Invalid customer data. Please provide all required fields.") from e

    normalized_email = data.email.strip().lower()
    if db.get(CustomerProfile, (CUSTOMERS_PARTITION, normalized_email)):
        raise HTTPException(status_code=400, detail="Email already registered")

    image_url = ""
    if file is not None and file.filename:
        content = file.file.read()
        if content:
            image_url = BlobContainer(CUSTOMER_IMAGES).upload(f"{normalized_email}_profileimage", content)

    profile = CustomerProfile(
        partition_key=CUSTOMERS_PARTITION,
        row_key=normalized_email,
        name=data.name,
        surname=data.surname,
        email=normalized_email,
        phone_number=data.phone_number,
        password_hash=get_password_hash(data.password),
        role=ROLE_CUSTOMER,
        image_url=image_url,
        created_date=datetime.utcnow(),
    )
    try:
        db.add(profile)
        db.commit()
        db.refresh(profile)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error adding customer profile: {e}")
        raise StorageFailure("Error adding customer profile") from e

    backup = CustomerResponse.model_validate(profile)
    ShareDirectory(CUSTOMER_FILES_SHARE, PROFILES_DIRECTORY).write_text(
        f"{normalized_email}.json", backup.model_dump_json()
    )

    logger.info(f"Customer profile for {normalized_email} added successfully.")
    return backup


# All customer profiles (Admin only)
@router.get("", response_model=List[CustomerResponse])
def list_customer_profiles(
    db: Session = Depends(get_db),
    _admin=Depends(admin_only),
):
    return (
        db.query(CustomerProfile)
        .filter(CustomerProfile.partition_key == CUSTOMERS_PARTITION)
        .order_by(CustomerProfile.created_date.asc())
        .all()
    )


# Order backups and activity log of one customer (Admin only)
@router.get("/{customer_id}/files", response_model=CustomerFiles)
def view_customer_files(
    customer_id: str,
    _admin=Depends(admin_only),
):
    container = BlobContainer(ORDER_FILES)
    contents = [
        container.download(name).decode("utf-8")
        for name in container.list_blobs(prefix=f"{customer_id}_Order_")
    ]
    files_content = "".join(f"{content}\n" for content in contents)

    logs_content = read_activity_log(customer_id)
    return CustomerFiles(
        customer_name=customer_id,
        customer_files_content=files_content,
        customer_logs_content=logs_content if logs_content is not None else NO_LOGS,
    )
