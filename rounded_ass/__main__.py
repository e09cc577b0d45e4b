"""
python -m rounded_ass 入口
"""
from .cli import cli


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
