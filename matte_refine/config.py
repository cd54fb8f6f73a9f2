"""
Default parameters for the matte post-processing pipeline.

THRESHOLD and TOLERANCE are fixed by the refine stage's definition; the radii
and border policy are the defaults exposed to callers and the CLI.
"""

# Extremum snap: alpha values below the threshold snap toward the local
# minimum, the rest toward the local maximum.
ALPHA_THRESHOLD = 128
SNAP_TOLERANCE = 40
REFINE_RADIUS = 1

# Box blur
BOX_RADIUS = 2

# "preserve" keeps border alpha as-is, "zero" clears it (matches the original
# web tool's output, where the border of the matte ends up transparent).
BORDER_PRESERVE = "preserve"
BORDER_ZERO = "zero"
BORDER_POLICIES = (BORDER_PRESERVE, BORDER_ZERO)
BORDER_POLICY = BORDER_PRESERVE

# Export naming: "photo.jpg" -> "photo_nobg.png"
OUTPUT_SUFFIX = "_nobg"
