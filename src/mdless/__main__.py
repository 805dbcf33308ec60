from mdless.cli import main

main(prog_name="mdless")
