"""Abstract base model for document-style records.

``Document`` gives every concrete model a server-assigned 12-byte identifier
(see ``modules.core.identifiers``) stored as its 24-character hex form.
"""

from __future__ import annotations

from django.db import models

from modules.core.identifiers import OBJECT_ID_LENGTH, new_object_id


class Document(models.Model):
    """Abstract base with a 12-byte hex primary key."""

    id = models.CharField(
        primary_key=True,
        max_length=OBJECT_ID_LENGTH,
        default=new_object_id,
        editable=False,
    )

    class Meta:
        abstract = True
