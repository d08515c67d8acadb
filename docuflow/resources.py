from __future__ import annotations

import urllib.parse
from typing import Any

from .http import ApiClient
from .normalize import ApiResult

DOCUMENT_FILTERS = (
    "page",
    "limit",
    "search",
    "status",
    "securityLevel",
    "isConfidential",
    "departmentId",
    "creatorId",
    "tag",
    "createdFrom",
    "createdTo",
)


def _document_query(filters: dict[str, Any]) -> dict[str, Any]:
    unknown = set(filters) - set(DOCUMENT_FILTERS)
    if unknown:
        raise ValueError(f"Unknown document filters: {', '.join(sorted(unknown))}")
    return filters


def _compact(body: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in body.items() if value is not None}


class _Resource:
    def __init__(self, client: ApiClient) -> None:
        self._client = client


class DocumentsApi(_Resource):
    async def list(self, **filters) -> ApiResult:
        return await self._client.get("/documents", _document_query(filters))

    async def list_public(self, **filters) -> ApiResult:
        filters.pop("securityLevel", None)
        filters.pop("isConfidential", None)
        return await self._client.get(
            "/documents/public", _document_query(filters), requires_auth=False
        )

    async def get(self, document_id: str) -> ApiResult:
        return await self._client.get(f"/documents/{document_id}")

    async def get_public(self, document_id: str) -> ApiResult:
        return await self._client.get(f"/documents/public/{document_id}", requires_auth=False)

    async def create(self, document: dict[str, Any]) -> ApiResult:
        return await self._client.post("/documents", document)

    async def update(self, document_id: str, document: dict[str, Any]) -> ApiResult:
        return await self._client.put(f"/documents/{document_id}", document)

    async def update_status(self, document_id: str, status: str) -> ApiResult:
        return await self._client.put(f"/documents/{document_id}", {"status": status})

    async def delete(self, document_id: str) -> ApiResult:
        return await self._client.delete(f"/documents/{document_id}")

    async def download_file(self, key_path: str, *, public: bool = False) -> bytes:
        quoted = urllib.parse.quote(key_path, safe="")
        return await self._client.download(
            f"/documents/files/download/{quoted}", requires_auth=not public
        )

    async def add_comment(self, document_id: str, content: str, *, internal: bool = False) -> ApiResult:
        return await self._client.post(
            f"/documents/{document_id}/comments", {"content": content, "isInternal": internal}
        )

    async def upload_url(
        self, document_id: str, file_name: str, content_type: str, *, cover: bool = False
    ) -> ApiResult:
        path = f"/documents/{document_id}/assets"
        if cover:
            path += "/cover"
        return await self._client.post(
            f"{path}/presigned-url", {"fileName": file_name, "contentType": content_type}
        )

    async def link_asset(
        self,
        document_id: str,
        s3_key: str,
        filename: str,
        content_type: str,
        size_bytes: int | None = None,
        *,
        cover: bool = False,
    ) -> ApiResult:
        body = {
            "s3Key": s3_key,
            "filename": filename,
            "contentType": content_type,
            "sizeBytes": size_bytes,
        }
        if cover:
            return await self._client.post(f"/documents/{document_id}/assets/cover", _compact(body))
        body["isCover"] = False
        return await self._client.post(f"/documents/{document_id}/assets", _compact(body))

    async def list_assets(self, document_id: str) -> ApiResult:
        return await self._client.get(f"/documents/{document_id}/assets")

    async def delete_asset(self, document_id: str, asset_id: str) -> ApiResult:
        return await self._client.delete(f"/documents/{document_id}/assets/{asset_id}")


class VersionsApi(_Resource):
    @staticmethod
    def _path(document_id: str, *parts: str) -> str:
        return "/".join((f"/documents/{document_id}/versions", *parts))

    async def list(self, document_id: str) -> ApiResult:
        return await self._client.get(self._path(document_id))

    async def get(self, document_id: str, version_id: str) -> ApiResult:
        return await self._client.get(self._path(document_id, version_id))

    async def latest(self, document_id: str) -> ApiResult:
        return await self._client.get(self._path(document_id, "latest"))

    async def upload_url(self, document_id: str, file_name: str, content_type: str) -> ApiResult:
        return await self._client.post(
            self._path(document_id, "presigned-url"),
            {"fileName": file_name, "contentType": content_type},
        )

    async def create(self, document_id: str, version: dict[str, Any]) -> ApiResult:
        return await self._client.post(self._path(document_id), version)

    async def update(self, document_id: str, version_id: str, changes: dict[str, Any]) -> ApiResult:
        return await self._client.put(self._path(document_id, version_id), changes)

    async def delete(self, document_id: str, version_id: str) -> ApiResult:
        return await self._client.delete(self._path(document_id, version_id))

    async def update_status(self, document_id: str, version_id: str, status: str) -> ApiResult:
        return await self._client.put(self._path(document_id, version_id, "status"), {"status": status})

    async def statistics(self, document_id: str) -> ApiResult:
        return await self._client.get(self._path(document_id, "statistics"))

    async def compare(self, document_id: str, old_version_id: str, new_version_id: str) -> ApiResult:
        return await self._client.get(
            self._path(document_id, "compare"),
            {"oldVersionId": old_version_id, "newVersionId": new_version_id},
        )

    async def validate(self, document_id: str, version_id: str, *, public: bool = False) -> ApiResult:
        if public:
            return await self._client.get(
                self._path(document_id, version_id, "validate-public"), requires_auth=False
            )
        return await self._client.get(self._path(document_id, version_id, "validate"))

    async def approve(
        self,
        document_id: str,
        version_id: str,
        *,
        signature_stamp_id: str | None = None,
        reason: str | None = None,
        signature_type: int | None = None,
    ) -> ApiResult:
        body = {"signatureStampId": signature_stamp_id, "reason": reason, "type": signature_type}
        return await self._client.post(self._path(document_id, version_id, "approve"), _compact(body))

    async def reject(self, document_id: str, version_id: str, reason: str) -> ApiResult:
        return await self._client.post(self._path(document_id, version_id, "reject"), {"reason": reason})


class SignaturesApi(_Resource):
    async def list(self, **params) -> ApiResult:
        return await self._client.get("/signature-stamps", params)

    async def active(self) -> ApiResult:
        return await self._client.get("/signature-stamps/active")

    async def get(self, stamp_id: str) -> ApiResult:
        return await self._client.get(f"/signature-stamps/{stamp_id}")

    async def create(
        self, name: str, image_url: str, s3_key: str, *, description: str | None = None
    ) -> ApiResult:
        body = {"name": name, "description": description, "imageUrl": image_url, "s3Key": s3_key}
        return await self._client.post("/signature-stamps", _compact(body))

    async def update(self, stamp_id: str, **changes) -> ApiResult:
        return await self._client.put(f"/signature-stamps/{stamp_id}", changes)

    async def delete(self, stamp_id: str) -> ApiResult:
        return await self._client.delete(f"/signature-stamps/{stamp_id}")

    async def upload_url(self, file_name: str, content_type: str) -> ApiResult:
        return await self._client.post(
            "/signature-stamps/presigned-url", {"fileName": file_name, "contentType": content_type}
        )


class TagsApi(_Resource):
    async def list(self) -> ApiResult:
        return await self._client.get("/tags")

    async def get(self, tag_id: str) -> ApiResult:
        return await self._client.get(f"/tags/{tag_id}")

    async def create(
        self, name: str, *, color: str | None = None, description: str | None = None
    ) -> ApiResult:
        body = {"name": name, "color": color, "description": description}
        return await self._client.post("/tags", _compact(body))

    async def update(self, tag_id: str, **changes) -> ApiResult:
        return await self._client.put(f"/tags/{tag_id}", changes)

    async def delete(self, tag_id: str) -> ApiResult:
        return await self._client.delete(f"/tags/{tag_id}")


class RolesApi(_Resource):
    async def list(self) -> ApiResult:
        return await self._client.get("/admin/roles")

    async def get(self, role_id: str) -> ApiResult:
        return await self._client.get(f"/admin/roles/{role_id}")

    async def create(self, role: dict[str, Any]) -> ApiResult:
        return await self._client.post("/admin/roles", role)

    async def update(self, role_id: str, changes: dict[str, Any]) -> ApiResult:
        return await self._client.put(f"/admin/roles/{role_id}", changes)

    async def delete(self, role_id: str) -> ApiResult:
        return await self._client.delete(f"/admin/roles/{role_id}")

    async def assign_to_user(self, role_id: str, user_id: str) -> ApiResult:
        return await self._client.put(f"/admin/roles/{role_id}/users/{user_id}", {})


class UsersApi(_Resource):
    async def me(self) -> dict[str, Any]:
        result = await self._client.get("/users/me")
        return result.payload

    async def update_profile(self, profile: dict[str, Any]) -> dict[str, Any]:
        result = await self._client.put("/users/profile", profile)
        return result.payload


class DepartmentsApi(_Resource):
    async def list(self) -> ApiResult:
        return await self._client.get("/departments")


class AuditLogsApi(_Resource):
    async def list(self, **params) -> ApiResult:
        return await self._client.get("/admin/audit-logs", params)

    async def stats(self) -> ApiResult:
        return await self._client.get("/admin/audit-logs/stats")

    async def get(self, log_id: str) -> ApiResult:
        return await self._client.get(f"/admin/audit-logs/{log_id}")
