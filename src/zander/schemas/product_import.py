"""Product import schemas for the validate/preview and commit workflow"""
import enum
from typing import Optional, List, Dict
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DuplicateAction(str, enum.Enum):
    SKIP = "skip"
    UPDATE = "update"


class ImportRowStatus(str, enum.Enum):
    IMPORTED = "imported"
    UPDATED = "updated"
    SKIPPED = "skipped"
    ERROR = "error"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ValidateRequest(CamelModel):
    rows: List[Dict[str, str]]


class ValidationResult(CamelModel):
    row: int
    data: Dict[str, str]
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    is_duplicate: bool = False
    existing_product_id: Optional[int] = None


class ValidationSummary(CamelModel):
    total: int
    valid: int
    invalid: int
    duplicates: int
    has_warnings: bool

    @classmethod
    def from_results(cls, results: List[ValidationResult]) -> "ValidationSummary":
        invalid = sum(1 for r in results if r.errors)
        return cls(
            total=len(results),
            valid=len(results) - invalid,
            invalid=invalid,
            duplicates=sum(1 for r in results if r.is_duplicate and not r.errors),
            has_warnings=any(r.warnings for r in results),
        )


class ValidateResponse(CamelModel):
    data: List[ValidationResult]
    summary: ValidationSummary


class ImportRequest(CamelModel):
    rows: List[Dict[str, str]]
    duplicate_action: DuplicateAction = DuplicateAction.SKIP


class ImportDetail(CamelModel):
    row: int
    name: str
    status: ImportRowStatus
    message: Optional[str] = None


class ImportResult(CamelModel):
    imported: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    details: List[ImportDetail] = Field(default_factory=list)

    def record(self, row: int, name: str, status: ImportRowStatus, message: Optional[str] = None) -> None:
        self.details.append(ImportDetail(row=row, name=name, status=status, message=message))
        if status == ImportRowStatus.IMPORTED:
            self.imported += 1
        elif status == ImportRowStatus.UPDATED:
            self.updated += 1
        elif status == ImportRowStatus.SKIPPED:
            self.skipped += 1
        else:
            self.errors += 1


class ImportResponse(CamelModel):
    data: ImportResult
