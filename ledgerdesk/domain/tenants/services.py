"""Tenant lookup used as the isolation boundary for import operations."""
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerdesk.core.database import get_db
from ledgerdesk.domain.tenants.models import Tenant


async def get_tenant_by_key(db: AsyncSession, key: uuid.UUID) -> Optional[Tenant]:
    result = await db.execute(select(Tenant).where(Tenant.key == key))
    return result.scalar_one_or_none()


async def create_tenant(db: AsyncSession, name: str) -> Tenant:
    tenant = Tenant(name=name, key=uuid.uuid4())
    db.add(tenant)
    await db.commit()
    return tenant


async def get_current_tenant(
    tenant_key: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Tenant:
    """Resolve the tenant named in the request path or raise 404."""
    tenant = await get_tenant_by_key(db, tenant_key)
    if not tenant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")
    return tenant
