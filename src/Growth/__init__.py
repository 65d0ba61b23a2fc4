"""
Growth: store growth-curve fitting package

Fits each store's monthly series (sales or customer counts) to a logistic
growth model and decomposes it into trend, seasonality and residual.

Modules included:

    config.py        – Tunable constants (tiers, limits, penalties, simplex)
    utils.py         – Utility helpers (notify, safe numerics, month labels)
    contracts.py     – Frozen records (parameter variants, fits, results)
    mask.py          – IQR validity mask + recent-months rescue
    shocks.py        – Structural-break candidates (scan + pandemic window)
    curves.py        – Logistic curve family (standard/shift/dual_shift/startup)
    objective.py     – Regularised fitting cost with physical constraints
    optimizer.py     – Nelder-Mead simplex with restarts (model-agnostic)
    selection.py     – Candidate fits + AIC selection with margin
    seasonality.py   – Median seasonal-ratio profile, mean 1.0
    residuals.py     – Decomposition + forecast-continuity nudge
    global_stats.py  – Cross-store statistics from mature stores
    stats.py         – YoY, CAGR, CV, skewness, Pareto rank, Z-chart
    analyzer.py      – Per-store tier classification and fitting
    data_prep.py     – Long frame → monthly per-store series
    pipeline.py      – Two-phase batch run + reporting frame

To run a batch, use:

    from Growth.data_prep import build_store_series, batch_max_date
    from Growth.pipeline import run_batch, results_to_frame

    stores = build_store_series(df)
    batch = run_batch(stores, batch_max_date=batch_max_date(df))
    summary = results_to_frame(batch)
"""
