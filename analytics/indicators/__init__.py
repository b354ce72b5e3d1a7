"""Moving-average, oscillator and volume indicators."""
