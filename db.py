"""
Database helpers for Supabase integration.
Stores the tracker configuration as one JSON document per user.
"""

import json
import logging
import os
from typing import Any, Optional

import streamlit as st
from supabase import Client, create_client

from models import TrackerConfig
from report import BackupFormatError, config_from_dict, config_to_dict

logger = logging.getLogger(__name__)

# Bump the suffix when the stored document schema changes
STORAGE_KEY = 'internship_buddy_data_v5'
STATE_TABLE = 'tracker_state'


def get_secret(name: str, default: Optional[Any] = None) -> Any:
    # prefer Streamlit secrets, fallback to env vars
    try:
        return st.secrets[name]
    except Exception:
        return os.getenv(name, default)


def get_current_user_id() -> str:
    return get_secret('TRACKER_USER_ID', 'default')


def get_supabase_client() -> Client:
    """Initialize and return Supabase client using Streamlit secrets."""
    url = get_secret("SUPABASE_URL")
    key = get_secret("SUPABASE_SERVICE_KEY")
    if not url or not key:
        raise RuntimeError("Missing SUPABASE_URL / SUPABASE_SERVICE_KEY.")
    return create_client(url, key)


def init_schema_if_needed(client: Optional[Client] = None) -> bool:
    """
    Verify the state table exists.
    The table itself is created from schema.sql.
    """
    supabase = client or get_supabase_client()
    try:
        supabase.table(STATE_TABLE).select('id').limit(1).execute()
        return True
    except Exception as e:
        logger.warning("Table %s missing or unreachable: %s", STATE_TABLE, e)
        return False


def load_config(user_id: str, client: Optional[Client] = None) -> TrackerConfig:
    """
    Load the stored configuration, falling back to defaults.

    Args:
        user_id: User identifier
        client: Supabase client (created from secrets when omitted)

    Returns:
        Stored TrackerConfig, or a default one if nothing valid is stored
    """
    supabase = client or get_supabase_client()

    result = (
        supabase
        .table(STATE_TABLE)
        .select('data_json')
        .eq('user_id', user_id)
        .eq('storage_key', STORAGE_KEY)
        .execute()
    )
    if not result.data:
        logger.info("No stored state for %s, using defaults", user_id)
        return TrackerConfig()

    try:
        return config_from_dict(json.loads(result.data[0]['data_json']))
    except (json.JSONDecodeError, BackupFormatError) as e:
        logger.error("Discarding unreadable stored state for %s: %s", user_id, e)
        return TrackerConfig()


def save_config(user_id: str, config: TrackerConfig, client: Optional[Client] = None) -> None:
    """
    Update or insert the stored configuration.

    Args:
        user_id: User identifier
        config: Configuration snapshot to persist
    """
    supabase = client or get_supabase_client()
    fields = {'data_json': json.dumps(config_to_dict(config))}

    # Try to update existing record
    result = (
        supabase
        .table(STATE_TABLE)
        .update(fields)
        .eq('user_id', user_id)
        .eq('storage_key', STORAGE_KEY)
        .execute()
    )
    if not result.data:
        # If no record was updated, insert new one
        fields.update({'user_id': user_id, 'storage_key': STORAGE_KEY})
        supabase.table(STATE_TABLE).insert(fields).execute()
    logger.debug("Saved state for %s (%d adjustments)", user_id, len(config.adjustments))


def clear_config(user_id: str, client: Optional[Client] = None) -> None:
    """Delete the stored configuration so the next load yields defaults."""
    supabase = client or get_supabase_client()
    supabase.table(STATE_TABLE).delete().eq('user_id', user_id).eq('storage_key', STORAGE_KEY).execute()
