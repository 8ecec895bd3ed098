"""Streamlit UI helpers for the dessert catalog and the cart summary.

Render functions take the Streamlit module as `st` so tests can pass a mock.
Labels follow the shop's French storefront.
"""

from __future__ import annotations

from typing import Any

import streamlit as st

from dessert_shop.domain.cart import CartStore
from dessert_shop.domain.models import Dessert
from dessert_shop.services.catalog_loader import CatalogSnapshot, CatalogStatus
from dessert_shop.ui.pending_removal import PendingRemovals
from dessert_shop.utils.logger import get_logger

logger = get_logger()

CATALOG_TITLE = "Les desserts"
ADD_LABEL = "Ajouter au panier"
TOTAL_LABEL = "Total de la commande"
CONFIRM_LABEL = "Confirmer votre commande"
RETRY_LABEL = "Réessayer"
LOAD_FAILED_MESSAGE = "Impossible de charger les desserts."
EMPTY_CATALOG_MESSAGE = "Aucun dessert disponible."


def format_price(amount: float) -> str:
    """Format a price the way the storefront shows it: $5.50."""
    return f"${amount:.2f}"


def cart_heading(count: int) -> str:
    return f"Votre panier ({count})"


def cart_line_label(dessert: Dessert, pending: bool = False) -> str:
    """Markdown for one cart line; pending removals are struck through."""
    text = f"{dessert.name} · {format_price(dessert.price)}"
    return f"~~{text}~~" if pending else text


def render_dessert_row(dessert: Dessert, cart: CartStore, st: Any = st) -> None:
    """One catalog card: image, add button (hidden once in the cart), type, name, price."""
    if dessert.has_remote_image:
        st.image(dessert.image_name)
    else:
        st.caption(f"🖼️ {dessert.image_name}")

    if not cart.contains(dessert):
        if st.button(f"🛒 {ADD_LABEL}", key=f"add_{dessert.id}", use_container_width=True):
            cart.add(dessert)
            st.rerun()

    st.caption(dessert.type)
    st.markdown(f"**{dessert.name}**")
    st.markdown(f"**:orange[{format_price(dessert.price)}]**")


def render_catalog(
    snapshot: CatalogSnapshot,
    cart: CartStore,
    st: Any = st,
    columns: int = 2,
) -> bool:
    """
    Render the catalog area for the current loader state.

    Returns:
        True when the user asked to retry a failed load.
    """
    st.title(CATALOG_TITLE)

    if snapshot.status is CatalogStatus.FAILED:
        st.error(LOAD_FAILED_MESSAGE)
        if snapshot.error is not None:
            st.caption(f"{type(snapshot.error).__name__}: {snapshot.error}")
        return bool(st.button(RETRY_LABEL, key="catalog_retry"))

    if snapshot.status is CatalogStatus.LOADING:
        st.info("Chargement…")
        return False

    if not snapshot.desserts:
        st.info(EMPTY_CATALOG_MESSAGE)
        return False

    cols = st.columns(columns)
    for idx, dessert in enumerate(snapshot.desserts):
        with cols[idx % columns]:
            render_dessert_row(dessert, cart, st=st)
    return False


def render_cart(cart: CartStore, pending: PendingRemovals, st: Any = st) -> None:
    """Cart summary: lines with remove buttons, total, and the confirm button."""
    snap = cart.snapshot()
    if snap.is_empty:
        return

    st.subheader(cart_heading(snap.count))
    for dessert in snap.items:
        is_pending = pending.is_pending(dessert)
        col1, col2 = st.columns([4, 1])
        with col1:
            st.markdown(cart_line_label(dessert, pending=is_pending))
        with col2:
            if not is_pending and st.button("✖", key=f"remove_{dessert.id}"):
                pending.mark(dessert)
                st.rerun()

    st.divider()
    col1, col2 = st.columns([3, 1])
    with col1:
        st.markdown(f"**{TOTAL_LABEL}**")
    with col2:
        st.markdown(f"**{format_price(snap.total)}**")

    if st.button(f"✅ {CONFIRM_LABEL}", key="confirm_order", type="primary", use_container_width=True):
        pending.discard()
        cart.confirm()
        st.rerun()
