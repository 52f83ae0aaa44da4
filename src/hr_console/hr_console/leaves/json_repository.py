from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from datetime import datetime, timezone

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime, to_iso_z
from ..core.constants import DONE
from ..core.enums import Decision, LeaveStatus, Role
from .memory_repository import check_version
from .model import ApprovalRecord, LeaveRequest
from .repository import LeaveRequestRepository

LEGACY_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_document(request: LeaveRequest) -> Dict[str, Any]:
    """Map a request to the camelCase document layout used by the web console."""
    return {
        "id": request.request_id,
        "userId": request.requester_id,
        "departmentCode": request.department_code,
        "leaveType": request.leave_type,
        "startDate": request.start_date.isoformat(),
        "endDate": request.end_date.isoformat(),
        "reason": request.reason,
        "status": request.status.value,
        "currentApproverRole": request.current_role_code,
        "approvalChain": [role.value for role in request.approval_chain],
        "approvals": [
            {
                "role": a.role.value,
                "approverId": a.approver_id,
                "date": to_iso_z(a.decided_at),
                "status": a.decision.value,
                "note": a.note,
            }
            for a in request.approvals
        ],
        "createdAt": to_iso_z(request.created_at),
        "version": request.version,
    }


def _created_at_of(doc: Dict[str, Any]) -> datetime:
    """Browser-written documents carry no createdAt; fall back to the
    epoch-millisecond id, then the first decision, then the epoch."""
    if doc.get("createdAt"):
        return parse_iso_datetime(doc["createdAt"])
    request_id = str(doc.get("id", ""))
    if request_id.isdigit():
        return datetime.fromtimestamp(int(request_id) / 1000, tz=timezone.utc)
    approvals = doc.get("approvals") or []
    if approvals and approvals[0].get("date"):
        return parse_iso_datetime(approvals[0]["date"])
    return LEGACY_EPOCH


def from_document(doc: Dict[str, Any]) -> LeaveRequest:
    current = doc["currentApproverRole"]
    return LeaveRequest(
        request_id=str(doc["id"]),
        requester_id=str(doc["userId"]),
        department_code=doc.get("departmentCode"),
        leave_type=doc["leaveType"],
        start_date=parse_iso_date(doc["startDate"]),
        end_date=parse_iso_date(doc["endDate"]),
        reason=doc.get("reason") or "",
        status=LeaveStatus(doc["status"]),
        current_approver_role=DONE if current == DONE else Role(current),
        approval_chain=tuple(Role(r) for r in doc["approvalChain"]),
        approvals=tuple(
            ApprovalRecord(
                role=Role(a["role"]),
                approver_id=str(a["approverId"]),
                decided_at=parse_iso_datetime(a["date"]),
                decision=Decision(a["status"]),
                note=a.get("note"),
            )
            for a in doc.get("approvals", [])
        ),
        created_at=_created_at_of(doc),
        version=int(doc.get("version", 0)),
    )


class JsonFileLeaveRequestRepository(LeaveRequestRepository):
    """Stores every request in a single JSON array file.

    Note: whole-file rewrite per mutation, replaced atomically; suited to a
    single process.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> List[Dict[str, Any]]:
        if not self._path.exists():
            return []
        text = self._path.read_text(encoding="utf-8").strip()
        if not text:
            return []
        return list(json.loads(text))

    def _save(self, docs: List[Dict[str, Any]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(self._path.parent), prefix=self._path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(docs, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self._path)
        except Exception:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise

    def get_all(self) -> Sequence[LeaveRequest]:
        with self._lock:
            return [from_document(d) for d in self._load()]

    def get_by_id(self, request_id: str) -> Optional[LeaveRequest]:
        with self._lock:
            for d in self._load():
                if str(d.get("id")) == request_id:
                    return from_document(d)
            return None

    def upsert(self, request: LeaveRequest, *, expected_version: Optional[int] = None) -> None:
        with self._lock:
            docs = self._load()
            index = next((i for i, d in enumerate(docs) if str(d.get("id")) == request.request_id), None)
            stored = from_document(docs[index]) if index is not None else None
            check_version(request.request_id, stored, expected_version)

            doc = to_document(request)
            if index is None:
                docs.append(doc)
            else:
                docs[index] = doc
            self._save(docs)

    def delete_by_id(self, request_id: str) -> bool:
        with self._lock:
            docs = self._load()
            kept = [d for d in docs if str(d.get("id")) != request_id]
            if len(kept) == len(docs):
                return False
            self._save(kept)
            return True
