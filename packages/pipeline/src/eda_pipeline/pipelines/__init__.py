"""
eda_pipeline.pipelines — End-to-end report pipelines.

Each pipeline module exports a build_*_report() function that works on
already-loaded tables, and an async run() that fetches the sources, builds
the report and writes its tables unless dry_run is set.

    from eda_pipeline.pipelines import covid, shooting

    report = await covid.run(scope="us", top_n=10)
    report = await shooting.run(dry_run=True)
"""
