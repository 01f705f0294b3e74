from livepoll.main import run

run()
