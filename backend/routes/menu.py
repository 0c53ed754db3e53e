# backend/routes/menu.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile
from sqlalchemy.orm import Session

from database import get_db
from models.menu import MenuItem
from models.users import User
from schemas.menu import MenuItemCreate, MenuItemOut, MenuItemUpdate, StockToggle, UploadOut
from utils.audit import client_ip, write_log
from utils.storage import save_image
from utils.tokenJWT import require_admin

router = APIRouter(tags=["Menu"])


def _get_item(db: Session, item_id: int) -> MenuItem:
    item = db.query(MenuItem).filter(MenuItem.id == item_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return item


def _options_json(options) -> Optional[list]:
    if options is None:
        return None
    return [o.model_dump() for o in options]


# =========================
# MENU (PUBLIC)
# =========================
@router.get("/menu/items", response_model=List[MenuItemOut])
def list_menu_items(
    category: Optional[str] = Query(None, description="Category slug"),
    popular: Optional[bool] = Query(None),
    in_stock: Optional[bool] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(get_db),
):
    query = db.query(MenuItem)
    if category:
        query = query.filter(MenuItem.category == category)
    if popular is not None:
        query = query.filter(MenuItem.popular == popular)
    if in_stock is not None:
        query = query.filter(MenuItem.in_stock == in_stock)
    query = query.order_by(MenuItem.created_at.desc(), MenuItem.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


@router.get("/menu/items/{item_id}", response_model=MenuItemOut)
def get_menu_item(item_id: int, db: Session = Depends(get_db)):
    return _get_item(db, item_id)


# =========================
# MENU EDITOR (ADMIN)
# =========================
@router.post("/menu/items", response_model=MenuItemOut, status_code=201)
def create_menu_item(
    payload: MenuItemCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    data = payload.model_dump()
    data["variants"] = _options_json(payload.variants)
    data["addons"] = _options_json(payload.addons)
    item = MenuItem(**data)
    db.add(item)
    db.commit()
    db.refresh(item)

    write_log(db, user_id=current_user.id, action="MENU_ITEM_CREATE", resource="menu",
              ip=client_ip(request), meta={"id": item.id, "name": item.name})
    return item


@router.put("/menu/items/{item_id}", response_model=MenuItemOut)
def replace_menu_item(
    item_id: int,
    payload: MenuItemCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    item = _get_item(db, item_id)
    for key, value in payload.model_dump().items():
        setattr(item, key, value)
    item.variants = _options_json(payload.variants)
    item.addons = _options_json(payload.addons)
    db.commit()
    db.refresh(item)

    write_log(db, user_id=current_user.id, action="MENU_ITEM_UPDATE", resource="menu",
              ip=client_ip(request), meta={"id": item.id})
    return item


@router.patch("/menu/items/{item_id}", response_model=MenuItemOut)
def edit_menu_item(
    item_id: int,
    payload: MenuItemUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    item = _get_item(db, item_id)
    changes = payload.model_dump(exclude_unset=True)
    for key, value in changes.items():
        setattr(item, key, value)
    if "variants" in changes:
        item.variants = _options_json(payload.variants)
    if "addons" in changes:
        item.addons = _options_json(payload.addons)
    db.commit()
    db.refresh(item)

    write_log(db, user_id=current_user.id, action="MENU_ITEM_EDIT", resource="menu",
              ip=client_ip(request), meta={"id": item.id, "fields": sorted(changes)})
    return item


# The admin list flips the flag before this call and refetches the list if it fails
@router.patch("/menu/items/{item_id}/stock", response_model=MenuItemOut)
def toggle_stock(
    item_id: int,
    payload: StockToggle,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    item = _get_item(db, item_id)
    item.in_stock = payload.in_stock
    db.commit()
    db.refresh(item)

    write_log(db, user_id=current_user.id, action="MENU_ITEM_STOCK", resource="menu",
              ip=client_ip(request), meta={"id": item.id, "in_stock": item.in_stock})
    return item


@router.delete("/menu/items/{item_id}")
def delete_menu_item(
    item_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    item = _get_item(db, item_id)
    db.delete(item)
    db.commit()
    write_log(db, user_id=current_user.id, action="MENU_ITEM_DELETE", resource="menu",
              ip=client_ip(request), meta={"id": item_id})
    return {"message": "Menu item deleted", "id": item_id}


# =========================
# IMAGE UPLOAD
# =========================
@router.post("/uploads/images", response_model=UploadOut, status_code=201)
def upload_image(
    request: Request,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    path = save_image(file)
    write_log(db, user_id=current_user.id, action="IMAGE_UPLOAD", resource="storage",
              ip=client_ip(request), meta={"path": path})
    return UploadOut(url=str(request.base_url).rstrip("/") + path)
