"""Create questions table

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the `questions` table: SERIAL id, title, content, TEXT[] tags
       and an insertion timestamp. Ownership arrives with revision 003.

Rollback: downgrade() drops the table (destructive).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "questions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False, comment="Censored question title"),
        sa.Column("content", sa.Text(), nullable=False, comment="Censored question body"),
        sa.Column(
            "tags",
            postgresql.ARRAY(sa.Text()),
            nullable=True,
            comment="Ordered list of free-form tags",
        ),
        sa.Column(
            "created_on",
            postgresql.TIMESTAMP(timezone=False),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_questions"),
    )


def downgrade() -> None:
    op.drop_table("questions")
