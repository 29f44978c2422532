from schema_builder.cli.schema import main

main()
