from timings.models import UnitMode

# ------------------------------
# CONFIG
# ------------------------------
W, H = 1280, 900
FPS = 60
DPR_DEFAULT = 1.0
SCROLL_STEP = 60       # pixels per mouse wheel notch
STATUS_H = 34          # status strip at the top of the window

FONT_NAME = "Arial"
FONT_SIZE = 16         # axis labels
LABEL_FONT_SIZE = 14   # unit labels

# ------------------------------
# COLORS (light report style)
# ------------------------------
BG = (247, 247, 247)         # graph background
WINDOW_BG = (228, 230, 234)  # area outside the graphs
TEXT = (0, 0, 0)
MUTED = (48, 48, 48)         # tick labels
AXIS = (0, 0, 0)
GRID = (230, 230, 230)       # vertical time lines
PANEL = (255, 255, 255)
BORDER = (190, 194, 204)

# Unit blocks
UNIT_COLOR = (149, 204, 232)         # ordinary compiler invocation
CUSTOM_BUILD_COLOR = (240, 177, 101)  # build script execution
CODEGEN_COLOR = (170, 149, 232)       # after metadata was ready

MODE_COLORS = {
    UnitMode.BUILD: UNIT_COLOR,
    UnitMode.CHECK: UNIT_COLOR,
    UnitMode.RUN_CUSTOM_BUILD: CUSTOM_BUILD_COLOR,
    UnitMode.DOC: UNIT_COLOR,
    UnitMode.DOCTEST: UNIT_COLOR,
    UnitMode.TEST: UNIT_COLOR,
}

# Dependency lines
DEP_LINE = (221, 221, 221)
DEP_LINE_HILITE = (0, 0, 0)
DEP_DASH = (2, 2)
GRID_DASH = (2, 4)

# Concurrency graph
WAITING_COLOR = (255, 0, 0)
INACTIVE_COLOR = (0, 0, 255)
ACTIVE_COLOR = (0, 128, 0)
CPU_FILL = (250, 119, 0, 51)   # 20% alpha

TRANSPARENT = (0, 0, 0, 0)

# Tooltip
TOOLTIP_BG = (255, 255, 255, 240)
TOOLTIP_BORDER = (120, 124, 136)
