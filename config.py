"""
FlapEvo Configuration
All tunable parameters for the neuro-evolution flappy-bird simulation.
"""

# ─── World ────────────────────────────────────────────────────────────────────
WORLD_WIDTH         = 800   # playfield width  (pixels)
WORLD_HEIGHT        = 600   # playfield height (pixels)
PIPE_SPAWN_INTERVAL = 120   # frames between two pipe spawns

# ─── Pipes ────────────────────────────────────────────────────────────────────
PIPE_WIDTH      = 80
PIPE_GAP_HEIGHT = 180
PIPE_MARGIN     = 80        # minimum distance between gap and top/bottom edge
PIPE_SPEED      = 3         # pixels moved left per frame

# ─── Bird kinematics ──────────────────────────────────────────────────────────
BIRD_X        = 100
BIRD_START_Y  = 300
BIRD_RADIUS   = 18
GRAVITY       = 0.5
JUMP_STRENGTH = -9          # velocity set by a jump (negative = up)
MAX_VELOCITY  = 12          # falling speed cap

# ─── Sensing ──────────────────────────────────────────────────────────────────
VERTICAL_SCALE   = 600      # divides y-coordinates → 0..1
HORIZONTAL_SCALE = 400      # divides horizontal pipe distance → 0..1
JUMP_THRESHOLD   = 0.5      # network output above this = jump

# Sensory inputs fed to every brain (index → meaning)
SENSOR_LABELS = {
    0: "bird_y",            # vertical position
    1: "velocity",          # vertical velocity mapped to 0..1
    2: "pipe_dist",         # horizontal distance to the nearest pipe
    3: "gap_top",           # top edge of the nearest gap
    4: "gap_bottom",        # bottom edge of the nearest gap
    5: "gap_offset",        # bird position relative to the gap centre
    6: "next_gap_top",      # top edge of the second pipe's gap (0.5 if none)
}
NUM_INPUTS = len(SENSOR_LABELS)

# ─── Neural Network ───────────────────────────────────────────────────────────
HIDDEN_NODES          = 16
OUTPUT_NODES          = 1
MUTATION_OFFSET_SCALE = 0.5  # mutation adds (U[-1,1) * scale) to a weight

# ─── Evolution ────────────────────────────────────────────────────────────────
POPULATION            = 50     # birds per generation
MUTATION_RATE         = 0.08   # probability each weight/bias is perturbed
ELITE_FRACTION        = 0.1    # top share cloned unchanged
CROSSOVER_PROBABILITY = 0.5    # chance a weight is taken from parent 2
SCORE_WEIGHT          = 1000   # raw fitness = score * SCORE_WEIGHT + distance
FLAT_FITNESS          = 0.01   # fitness given to everyone when all raw fitness is 0

# Elitism policies:
#   "top"       – clone the top ELITE_FRACTION birds that scored at least once,
#                 falling back to the best-ever brain if none qualified
#   "champion"  – always seed exactly one clone of the best-ever brain
ELITISM_MODE = "top"

# ─── Run ──────────────────────────────────────────────────────────────────────
MAX_GENERATIONS        = 100
MAX_FRAMES_PER_EPISODE = 20000   # episode is ended once this many frames pass
SPEED                  = 1       # world ticks per simulation step
SPEED_CHOICES          = (1, 2, 5, 10)

# ─── Output / Logging ─────────────────────────────────────────────────────────
SAVE_DIR           = "output"      # directory for saved images and charts
CHART_INTERVAL     = 10            # save snapshot + chart every N generations
SAVE_NEURAL_SAMPLE = True          # save champion network diagrams
LOG_CSV            = True          # write per-generation CSV log
