from pydantic import BaseModel


class StudyMaterialCreate(BaseModel):
    title: str
    subject: str = ""
    extracted_content: str = ""


class StudyMaterialUpdate(BaseModel):
    title: str | None = None
    subject: str | None = None
    extracted_content: str | None = None


class StudyMaterial(BaseModel):
    id: str
    title: str
    subject: str
    extracted_content: str
    created_at: str
    updated_at: str


class StudyMaterialList(BaseModel):
    items: list[StudyMaterial]
    total: int
    offset: int
    limit: int
