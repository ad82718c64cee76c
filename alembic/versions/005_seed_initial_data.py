"""005: seed initial data

Revision ID: 005
Revises: 004
Create Date: 2026-10-19

Staff accounts cannot self-register, so one admin and one employee are
seeded. Passwords are hashed in the database with pgcrypto's bcrypt
(``$2a$``), which bcrypt.checkpw accepts. Change them after first login.
"""

from typing import Sequence, Union

from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        INSERT INTO users (name, email, password_hash, role) VALUES
            ('Administrador', 'admin@libreria.local',
             crypt('Admin1234', gen_salt('bf', 12)), 'admin'),
            ('Empleado', 'empleado@libreria.local',
             crypt('Empleado1234', gen_salt('bf', 12)), 'employee');
    """)

    # Sample products
    op.execute("""
        INSERT INTO products (id, name, brand, price_cents, stock) VALUES
            ('BK-CIEN-ANOS', 'Cien años de soledad', 'Sudamericana', 1899900, 12),
            ('BK-RAYUELA', 'Rayuela', 'Alfaguara', 1549900, 8),
            ('BK-FICCIONES', 'Ficciones', 'Debolsillo', 999900, 20),
            ('BK-CUADERNO-A4', 'Cuaderno A4 rayado', 'Rivadavia', 349900, 150);
    """)


def downgrade() -> None:
    op.execute("""
        DELETE FROM products
        WHERE id IN ('BK-CIEN-ANOS', 'BK-RAYUELA', 'BK-FICCIONES', 'BK-CUADERNO-A4');
    """)
    op.execute(
        "DELETE FROM users WHERE email IN ('admin@libreria.local', 'empleado@libreria.local');"
    )
