"""
Dessert Shop — Streamlit UI entry point.
"""

import time

import streamlit as st

# Load .env first so PRODUCTS_URL / CATALOG_SOURCE overrides are picked up
from dessert_shop.utils.config import load_config, log_level, removal_delay_seconds
load_config()

from dessert_shop.services.shop_session import ShopSession
from dessert_shop.ui.cart_display import render_cart, render_catalog
from dessert_shop.ui.pending_removal import PendingRemovals
from dessert_shop.utils.logger import get_logger, level_from_name, setup_logger

setup_logger("dessert_shop", level=level_from_name(log_level()))
log = get_logger()

st.set_page_config(page_title="Les desserts", layout="centered")

# One session object per browser session; no cart is shared between users
if "shop" not in st.session_state:
    st.session_state.shop = ShopSession()
if "pending_removals" not in st.session_state:
    st.session_state.pending_removals = PendingRemovals(removal_delay_seconds())

shop = st.session_state.shop
pending = st.session_state.pending_removals

# Removals whose delay has passed leave the cart before anything is drawn
pending.commit_due(shop.cart)

with st.spinner("Chargement des desserts…"):
    shop.ensure_catalog()

if render_catalog(shop.catalog.snapshot(), shop.cart):
    log.info("Retrying catalog load")
    with st.spinner("Chargement des desserts…"):
        shop.reload_catalog()
    st.rerun()

render_cart(shop.cart, pending)

wait = pending.seconds_until_next()
if wait is not None:
    time.sleep(wait)
    st.rerun()
