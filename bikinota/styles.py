"""
Tailwind class constants (rose accent on light slate).

Pages use these constants instead of long inline class strings.
"""

from __future__ import annotations

C_NUMERIC = "tabular-nums"

C_BG = "bg-gradient-to-br from-rose-50/40 to-pink-50/40 text-slate-900 min-h-screen"
C_CONTAINER = "w-full max-w-5xl mx-auto px-6 py-6 gap-6"

C_CARD = "bg-white border border-slate-200 shadow-sm rounded-xl"
C_CARD_HOVER = "transition-colors hover:bg-slate-50 hover:border-slate-300"

C_PAGE_TITLE = "text-2xl font-bold tracking-tight text-slate-900"
C_SECTION_TITLE = "text-sm font-semibold text-slate-900"
C_TEXT_MUTED = "text-sm text-slate-600"

C_BTN_PRIM = (
    "bg-rose-600 text-white hover:bg-rose-700 active:scale-[0.99] rounded-lg px-4 py-2 text-sm "
    "font-semibold transition-all focus-visible:outline-none focus-visible:ring-2 focus-visible:ring-rose-400/40"
)
C_BTN_SEC = (
    "bg-white text-slate-900 border border-slate-200 hover:bg-slate-50 active:scale-[0.99] rounded-lg px-4 py-2 "
    "text-sm font-semibold transition-all focus-visible:outline-none focus-visible:ring-2 focus-visible:ring-slate-400/30"
)
C_BTN_DANGER = (
    "bg-rose-50 text-rose-700 border border-rose-200 hover:bg-rose-100 active:scale-[0.99] rounded-lg px-3 py-2 "
    "text-sm font-semibold transition-all"
)

C_INPUT = "w-full text-sm"

C_TABLE_HEADER = "w-full px-3 py-2 text-xs font-semibold uppercase tracking-wider text-slate-600 border-b border-slate-200"
C_TABLE_ROW = "w-full px-3 py-2 text-sm text-slate-800 border-b border-slate-200/70"

C_BADGE_GREEN = "bg-emerald-50 text-emerald-700 border border-emerald-200 px-2 py-0.5 rounded-full text-xs font-medium text-center"
C_BADGE_BLUE = "bg-sky-50 text-sky-700 border border-sky-200 px-2 py-0.5 rounded-full text-xs font-medium text-center"
C_BADGE_GRAY = "bg-slate-100 text-slate-700 border border-slate-200 px-2 py-0.5 rounded-full text-xs font-medium text-center"
