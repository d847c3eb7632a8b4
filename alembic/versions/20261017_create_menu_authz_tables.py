"""create_menu_authz_tables

Revision ID: 20261017_menu_authz
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261017_menu_authz'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'menus',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        sa.Column('menu_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('menu_key', sa.String(length=100), nullable=False),
        sa.Column('title', sa.String(length=128), nullable=False),
        sa.Column('url', sa.String(length=256), nullable=True),
        sa.Column('levels', sa.SmallInteger(), nullable=True),
        sa.Column('use_new_icon', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['parent_id'], ['menus.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_menus_id'), 'menus', ['id'], unique=False)
    op.create_index(op.f('ix_menus_parent_id'), 'menus', ['parent_id'], unique=False)
    op.create_index(op.f('ix_menus_menu_key'), 'menus', ['menu_key'], unique=True)

    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('role_name', sa.String(length=64), nullable=False),
        sa.Column('role_comment', sa.String(length=256), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_roles_id'), 'roles', ['id'], unique=False)
    op.create_index(op.f('ix_roles_role_name'), 'roles', ['role_name'], unique=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_name', sa.String(length=150), nullable=False),
        sa.Column('password', sa.String(length=256), nullable=False),
        sa.Column('salt', sa.String(length=64), nullable=True),
        sa.Column('refresh_token', sa.String(length=512), nullable=True),
        sa.Column('refresh_token_expiry', sa.DateTime(timezone=True), nullable=True),
        sa.Column('name', sa.String(length=128), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_user_name'), 'users', ['user_name'], unique=True)

    op.create_table(
        'ui_elements',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('element_key', sa.String(length=100), nullable=False),
        sa.Column('element_name', sa.String(length=128), nullable=False),
        sa.Column('element_type', sa.String(length=32), nullable=False, server_default='button'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_ui_elements_id'), 'ui_elements', ['id'], unique=False)
    op.create_index(op.f('ix_ui_elements_element_key'), 'ui_elements', ['element_key'], unique=True)
    op.create_index(op.f('ix_ui_elements_element_type'), 'ui_elements', ['element_type'], unique=False)

    # Join tables: composite primary key, no surrogate id, no ON DELETE CASCADE
    # (the services remove link rows before deleting either side)
    op.create_table(
        'menu_roles',
        sa.Column('menu_id', sa.Integer(), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['menu_id'], ['menus.id']),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id']),
        sa.PrimaryKeyConstraint('menu_id', 'role_id'),
    )
    op.create_index(op.f('ix_menu_roles_role_id'), 'menu_roles', ['role_id'], unique=False)

    op.create_table(
        'user_roles',
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id']),
        sa.PrimaryKeyConstraint('user_id', 'role_id'),
    )
    op.create_index(op.f('ix_user_roles_role_id'), 'user_roles', ['role_id'], unique=False)

    op.create_table(
        'ui_element_user_permissions',
        sa.Column('element_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['element_id'], ['ui_elements.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('element_id', 'user_id'),
    )
    op.create_index(
        op.f('ix_ui_element_user_permissions_user_id'), 'ui_element_user_permissions', ['user_id'], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f('ix_ui_element_user_permissions_user_id'), table_name='ui_element_user_permissions')
    op.drop_table('ui_element_user_permissions')
    op.drop_index(op.f('ix_user_roles_role_id'), table_name='user_roles')
    op.drop_table('user_roles')
    op.drop_index(op.f('ix_menu_roles_role_id'), table_name='menu_roles')
    op.drop_table('menu_roles')

    op.drop_index(op.f('ix_ui_elements_element_type'), table_name='ui_elements')
    op.drop_index(op.f('ix_ui_elements_element_key'), table_name='ui_elements')
    op.drop_index(op.f('ix_ui_elements_id'), table_name='ui_elements')
    op.drop_table('ui_elements')

    op.drop_index(op.f('ix_users_user_name'), table_name='users')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')

    op.drop_index(op.f('ix_roles_role_name'), table_name='roles')
    op.drop_index(op.f('ix_roles_id'), table_name='roles')
    op.drop_table('roles')

    op.drop_index(op.f('ix_menus_menu_key'), table_name='menus')
    op.drop_index(op.f('ix_menus_parent_id'), table_name='menus')
    op.drop_index(op.f('ix_menus_id'), table_name='menus')
    op.drop_table('menus')
