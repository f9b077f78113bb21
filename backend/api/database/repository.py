"""Repositories for narrative, illustration and upload persistence using raw asyncpg SQL.

Every lookup made on behalf of a user is scoped by owner_id. A narrative that
does not exist and one owned by someone else are indistinguishable: both
come back as None (or False), and routes turn that into a 404.
"""

import json
from datetime import datetime, timezone
from typing import Optional, Sequence

import asyncpg

from backend.core.modules.page_splitter import split_pages
from backend.core.types import Illustration, Narrative
from ..models.enums import IllustrationStatus
from ..models.responses import (
    BookResponse,
    IllustrationResponse,
    NarrativePageResponse,
    NarrativeResponse,
    NarrativeSummaryResponse,
)


def build_pages(content: str, illustrations: Sequence[asyncpg.Record]) -> list[NarrativePageResponse]:
    """Split narrative content into pages and attach each page's image by page number."""
    image_by_page = {row["page_number"]: row["image_url"] for row in illustrations}
    return [
        NarrativePageResponse(
            page_number=index + 1,
            text=text,
            image_url=image_by_page.get(index + 1),
        )
        for index, text in enumerate(split_pages(content))
    ]


class NarrativeRepository:
    """Repository for narrative persistence operations."""

    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    async def create_narrative(
        self,
        narrative_id: str,
        owner_id: str,
        narrative: Narrative,
        cover_image_url: Optional[str],
        customizations: Optional[dict] = None,
        illustration_status: IllustrationStatus = IllustrationStatus.NARRATIVE_ONLY,
    ) -> None:
        """Save a newly generated narrative."""
        await self.conn.execute(
            """
            INSERT INTO narratives
                (id, owner_id, title, content, cover_image_url, customizations_json,
                 is_fallback, illustration_status)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            """,
            narrative_id,
            owner_id,
            narrative.title,
            narrative.body,
            cover_image_url,
            json.dumps(customizations or {}),
            narrative.is_fallback,
            illustration_status.value,
        )

    async def update_illustration_status(
        self,
        narrative_id: str,
        status: IllustrationStatus,
    ) -> None:
        """Move a narrative to a new illustration state."""
        await self.conn.execute(
            """
            UPDATE narratives
            SET illustration_status = $2,
                updated_at = $3
            WHERE id = $1
            """,
            narrative_id,
            status.value,
            datetime.now(timezone.utc),
        )

    async def get_narrative_record(
        self,
        narrative_id: str,
        owner_id: str,
    ) -> Optional[asyncpg.Record]:
        """Get the raw narrative row if it exists and belongs to owner_id."""
        return await self.conn.fetchrow(
            "SELECT * FROM narratives WHERE id = $1 AND owner_id = $2",
            narrative_id,
            owner_id,
        )

    async def get_narrative(
        self,
        narrative_id: str,
        owner_id: str,
    ) -> Optional[NarrativeResponse]:
        """Get a narrative with its pages and illustrations."""
        narrative = await self.get_narrative_record(narrative_id, owner_id)
        if not narrative:
            return None

        illustrations = await self._fetch_illustrations(narrative_id)
        return self._record_to_response(narrative, illustrations)

    async def get_book(self, narrative_id: str) -> Optional[BookResponse]:
        """
        Get the print/share view of a narrative.

        Not owner-scoped: anyone holding the share link can read it, signed
        in or not.
        """
        narrative = await self.conn.fetchrow(
            "SELECT * FROM narratives WHERE id = $1",
            narrative_id,
        )
        if not narrative:
            return None

        illustrations = await self._fetch_illustrations(narrative_id)
        return BookResponse(
            id=narrative["id"],
            title=narrative["title"],
            cover_image_url=narrative["cover_image_url"],
            created_at=narrative["created_at"],
            pages=build_pages(narrative["content"], illustrations),
        )

    async def list_narratives(
        self,
        owner_id: str,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[NarrativeSummaryResponse], int]:
        """List an owner's narratives, newest first."""
        total = await self.conn.fetchval(
            "SELECT COUNT(*) FROM narratives WHERE owner_id = $1",
            owner_id,
        )
        rows = await self.conn.fetch(
            """
            SELECT id, title, cover_image_url, illustration_status, created_at
            FROM narratives
            WHERE owner_id = $1
            ORDER BY created_at DESC
            LIMIT $2 OFFSET $3
            """,
            owner_id,
            limit,
            offset,
        )

        narratives = [
            NarrativeSummaryResponse(
                id=row["id"],
                title=row["title"],
                cover_image_url=row["cover_image_url"],
                illustration_status=IllustrationStatus(row["illustration_status"]),
                created_at=row["created_at"],
            )
            for row in rows
        ]
        return narratives, total or 0

    async def delete_narrative(self, narrative_id: str, owner_id: str) -> bool:
        """Delete a narrative and its illustrations (cascades via FK)."""
        result = await self.conn.execute(
            "DELETE FROM narratives WHERE id = $1 AND owner_id = $2",
            narrative_id,
            owner_id,
        )
        # Result is like "DELETE 1" or "DELETE 0"
        return result.split()[-1] != "0"

    async def _fetch_illustrations(self, narrative_id: str) -> list[asyncpg.Record]:
        return await self.conn.fetch(
            """
            SELECT * FROM narrative_illustrations
            WHERE narrative_id = $1
            ORDER BY page_number
            """,
            narrative_id,
        )

    def _record_to_response(
        self,
        narrative: asyncpg.Record,
        illustrations: Sequence[asyncpg.Record],
    ) -> NarrativeResponse:
        """Convert asyncpg Records to response model."""
        customizations = {}
        if narrative["customizations_json"]:
            customizations = json.loads(narrative["customizations_json"])

        return NarrativeResponse(
            id=narrative["id"],
            title=narrative["title"],
            content=narrative["content"],
            cover_image_url=narrative["cover_image_url"],
            customizations=customizations,
            is_fallback=narrative["is_fallback"],
            illustration_status=IllustrationStatus(narrative["illustration_status"]),
            pages=build_pages(narrative["content"], illustrations),
            illustrations=[
                IllustrationResponse(
                    page_number=row["page_number"],
                    image_url=row["image_url"],
                    prompt=row["prompt"],
                    is_placeholder=row["is_placeholder"],
                )
                for row in illustrations
            ],
            created_at=narrative["created_at"],
            updated_at=narrative["updated_at"],
        )


class IllustrationRepository:
    """Repository for narrative illustration records."""

    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    async def count_illustrations(self, narrative_id: str) -> int:
        """Number of illustration rows recorded for a narrative."""
        count = await self.conn.fetchval(
            "SELECT COUNT(*) FROM narrative_illustrations WHERE narrative_id = $1",
            narrative_id,
        )
        return count or 0

    async def save_illustrations(
        self,
        narrative_id: str,
        illustrations: Sequence[Illustration],
    ) -> None:
        """Insert all illustrations and settle the narrative in one transaction."""
        async with self.conn.transaction():
            await self.conn.executemany(
                """
                INSERT INTO narrative_illustrations
                    (narrative_id, image_url, prompt, page_number, is_placeholder)
                VALUES ($1, $2, $3, $4, $5)
                """,
                [
                    (
                        narrative_id,
                        illustration.image_url,
                        illustration.prompt,
                        illustration.page_number,
                        illustration.is_placeholder,
                    )
                    for illustration in illustrations
                ],
            )
            await NarrativeRepository(self.conn).update_illustration_status(
                narrative_id,
                IllustrationStatus.ILLUSTRATIONS_SETTLED,
            )


class UploadRepository:
    """Repository for uploaded source photos."""

    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    async def record_upload(
        self,
        owner_id: str,
        image_url: str,
        original_filename: Optional[str] = None,
    ) -> int:
        """Record an uploaded photo and return its row ID."""
        return await self.conn.fetchval(
            """
            INSERT INTO uploaded_images (owner_id, image_url, original_filename)
            VALUES ($1, $2, $3)
            RETURNING id
            """,
            owner_id,
            image_url,
            original_filename,
        )
