from interface_compiler.main import run

run()
