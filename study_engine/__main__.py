from study_engine.cli.main import run

run()
