"""HTTP command surface for Daggerboard."""
