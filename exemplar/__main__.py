from exemplar.cmdline import execute

if __name__ == "__main__":
    execute()
