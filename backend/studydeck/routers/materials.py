import aiosqlite
from fastapi import APIRouter, Depends, HTTPException

from studydeck.db.sqlite import (
    create_material,
    delete_material,
    get_db,
    get_material,
    list_materials,
    update_material,
)
from studydeck.models.material import (
    StudyMaterial,
    StudyMaterialCreate,
    StudyMaterialList,
    StudyMaterialUpdate,
)
from studydeck.services.session_registry import discard_material_sessions

router = APIRouter()


@router.post("/", response_model=StudyMaterial, status_code=201)
async def create(
    body: StudyMaterialCreate, db: aiosqlite.Connection = Depends(get_db)
):
    return await create_material(db, body)


@router.get("/", response_model=StudyMaterialList)
async def list_all(
    offset: int = 0, limit: int = 50, db: aiosqlite.Connection = Depends(get_db)
):
    items, total = await list_materials(db, offset, limit)
    return StudyMaterialList(items=items, total=total, offset=offset, limit=limit)


@router.get("/{material_id}", response_model=StudyMaterial)
async def get_one(material_id: str, db: aiosqlite.Connection = Depends(get_db)):
    material = await get_material(db, material_id)
    if not material:
        raise HTTPException(status_code=404, detail="Study material not found")
    return material


@router.patch("/{material_id}", response_model=StudyMaterial)
async def update(
    material_id: str,
    body: StudyMaterialUpdate,
    db: aiosqlite.Connection = Depends(get_db),
):
    material = await update_material(db, material_id, body)
    if not material:
        raise HTTPException(status_code=404, detail="Study material not found")
    return material


@router.delete("/{material_id}", status_code=204)
async def delete(material_id: str, db: aiosqlite.Connection = Depends(get_db)):
    """Delete a material together with its flashcards and open review sessions."""
    deleted = await delete_material(db, material_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Study material not found")
    discard_material_sessions(material_id)
