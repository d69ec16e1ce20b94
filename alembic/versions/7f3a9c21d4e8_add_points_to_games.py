"""add points to games

Revision ID: 7f3a9c21d4e8
Revises: base_0001
Create Date: 2026-10-18 15:47:03.502771

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "7f3a9c21d4e8"
down_revision: Union[str, Sequence[str], None] = "base_0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # sum of per-answer scores; fill-in-the-blank answers can earn partial points
    op.add_column(
        "games", sa.Column("points", sa.Integer(), nullable=False, server_default="0")
    )


def downgrade() -> None:
    op.drop_column("games", "points")
