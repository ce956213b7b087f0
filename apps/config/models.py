from __future__ import annotations

from django.db import models

from apps.core.models import BaseModel


class SiteOption(BaseModel):
    key = models.CharField(max_length=64, unique=True)
    value = models.JSONField(null=True, blank=True)

    class Meta:
        verbose_name = "Site Option"
        verbose_name_plural = "Site Options"
        ordering = ["key"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.key}={self.value!r}"

    def save(self, *args, **kwargs):  # type: ignore[override]
        super().save(*args, **kwargs)
        from .services import invalidate_cache

        invalidate_cache()

    def delete(self, *args, **kwargs):  # type: ignore[override]
        result = super().delete(*args, **kwargs)
        from .services import invalidate_cache

        invalidate_cache()
        return result
