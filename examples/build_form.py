"""
Example: assemble a multipart/form-data body from the command line.

    python examples/build_form.py -f name=alice -u avatar=photo.jpg -o body.bin
"""

import logging

import click
from formstream import MultipartStreamBuilder


@click.command()
@click.option("-f", "--field", "fields", multiple=True, help="Text field as name=value.")
@click.option("-u", "--file", "files", multiple=True, help="File part as name=path.")
@click.option("-b", "--boundary", default=None, help="Fixed boundary instead of a random one.")
@click.option("-o", "--output", type=click.File("wb"), default="-", help="Where to write the body.")
@click.option("-v", "--verbose", is_flag=True, help="Log part registration.")
def main(fields, files, boundary, output, verbose) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    builder = MultipartStreamBuilder(boundary=boundary)
    for item in fields:
        name, _, value = item.partition("=")
        builder.add_part(name, value)

    handles = []
    try:
        for item in files:
            name, _, path = item.partition("=")
            fh = open(path, "rb")
            handles.append(fh)
            builder.add_part(name, fh)
        body = builder.build().read_all()
    finally:
        for fh in handles:
            fh.close()

    output.write(body)
    click.secho(f"Content-Type: {builder.content_type}", fg="green", err=True)
    click.secho(f"Content-Length: {len(body)}", fg="green", err=True)


if __name__ == "__main__":
    main()
