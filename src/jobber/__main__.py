from jobber.cli import cli

cli(prog_name="jobber")
