# backend/routes/categories.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from database import get_db
from models.menu import Category
from models.users import User
from schemas.menu import CategoryCreate, CategoryOut, CategoryUpdate
from utils.audit import client_ip, write_log
from utils.tokenJWT import require_admin

router = APIRouter(prefix="/categories", tags=["Categories"])


def _slug_taken(db: Session, slug: str, exclude_id: Optional[int] = None) -> bool:
    q = db.query(Category).filter(Category.slug == slug)
    if exclude_id is not None:
        q = q.filter(Category.id != exclude_id)
    return q.first() is not None


# Retrieve categories in display order
@router.get("", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return db.query(Category).order_by(Category.display_order.asc(), Category.id.asc()).all()


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(
    payload: CategoryCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    if _slug_taken(db, payload.slug):
        raise HTTPException(status_code=409, detail="Category slug already exists")
    category = Category(**payload.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)

    write_log(db, user_id=current_user.id, action="CATEGORY_CREATE", resource="categories",
              ip=client_ip(request), meta={"id": category.id, "slug": category.slug})
    return category


@router.patch("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    changes = payload.model_dump(exclude_unset=True)
    if changes.get("slug") and _slug_taken(db, changes["slug"], exclude_id=category.id):
        raise HTTPException(status_code=409, detail="Category slug already exists")
    for key, value in changes.items():
        setattr(category, key, value)
    db.commit()
    db.refresh(category)

    write_log(db, user_id=current_user.id, action="CATEGORY_UPDATE", resource="categories",
              ip=client_ip(request), meta={"id": category.id})
    return category


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    db.delete(category)
    db.commit()
    write_log(db, user_id=current_user.id, action="CATEGORY_DELETE", resource="categories",
              ip=client_ip(request), meta={"id": category_id})
    return {"message": "Category deleted", "id": category_id}
